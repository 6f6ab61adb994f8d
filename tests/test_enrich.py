import asyncio
import logging
from unittest.mock import AsyncMock

from bojtrack.enrich import enrich_problems
from bojtrack.errors import FetchError
from bojtrack.models import SolvedAcProblem, WorkbookProblem


def make_problems(n: int) -> list[WorkbookProblem]:
    return [
        WorkbookProblem(problem_id=1000 + i, title=f"p{i}", order=i + 1) for i in range(n)
    ]


async def level_lookup(problem_id: int) -> SolvedAcProblem:
    return SolvedAcProblem(problem_id=problem_id, level=problem_id % 31)


def test_levels_are_merged_in_order():
    problems = make_problems(3)

    enriched = asyncio.run(enrich_problems(problems, lookup=level_lookup, delay_seconds=0))

    assert [p.problem_id for p in enriched] == [1000, 1001, 1002]
    assert [p.level for p in enriched] == [1000 % 31, 1001 % 31, 1002 % 31]
    assert all(p.level is None for p in problems)


def test_all_failures_preserve_order_and_count(caplog):
    problems = make_problems(12)
    lookup = AsyncMock(side_effect=FetchError("HTTP 500"))

    with caplog.at_level(logging.WARNING, logger="bojtrack.enrich"):
        enriched = asyncio.run(enrich_problems(problems, lookup=lookup, delay_seconds=0))

    assert enriched == problems
    assert lookup.await_count == 12
    assert len(caplog.records) == 12
    assert "1000" in caplog.records[0].getMessage()


def test_single_failure_does_not_abort_batch():
    async def flaky(problem_id: int) -> SolvedAcProblem:
        if problem_id == 1001:
            raise RuntimeError("boom")
        return SolvedAcProblem(problem_id=problem_id, level=5)

    enriched = asyncio.run(enrich_problems(make_problems(3), lookup=flaky, delay_seconds=0))

    assert [p.level for p in enriched] == [5, None, 5]


def test_batches_never_exceed_batch_size():
    in_flight = 0
    peak = 0

    async def slow_lookup(problem_id: int) -> SolvedAcProblem:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0)
        in_flight -= 1
        return SolvedAcProblem(problem_id=problem_id, level=1)

    enriched = asyncio.run(enrich_problems(make_problems(25), lookup=slow_lookup, delay_seconds=0))

    assert len(enriched) == 25
    assert peak == 10


def test_delay_only_between_batches(mocker):
    sleep = mocker.patch("bojtrack.enrich.asyncio.sleep", new=AsyncMock())

    asyncio.run(enrich_problems(make_problems(21), lookup=level_lookup))
    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.2)

    sleep.reset_mock()
    asyncio.run(enrich_problems(make_problems(10), lookup=level_lookup))
    assert sleep.await_count == 0


def test_empty_input():
    assert asyncio.run(enrich_problems([], lookup=level_lookup)) == []
