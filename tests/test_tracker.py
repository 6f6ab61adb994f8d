import asyncio
from unittest.mock import AsyncMock

from bojtrack.errors import FetchError
from bojtrack.models import ProblemStatus, ScraperConfig, SolvedAcProblem
from bojtrack.tracker import WorkbookTracker


async def tier_lookup(problem_id: int) -> SolvedAcProblem:
    return SolvedAcProblem(problem_id=problem_id, level=11)


def make_tracker(store) -> WorkbookTracker:
    return WorkbookTracker(
        config=ScraperConfig(batch_delay_seconds=0), store=store, lookup=tier_lookup
    )


def test_load_workbook_enriches_and_selects(mocker, fixture_text, store):
    mocker.patch(
        "bojtrack.workbook.fetch_text",
        new=AsyncMock(return_value=fixture_text("boj_workbook.html")),
    )
    store.update_status(2052, 1463, ProblemStatus.SOLVED)
    store.update_status(2052, 9095, ProblemStatus.FAILED)

    tracker = make_tracker(store)
    result = asyncio.run(tracker.load_workbook(2052))

    assert result.success
    assert [p.level for p in result.workbook.problems] == [11, 11, 11]
    assert result.next_problem.problem_id == 11726
    assert (result.stats.solved, result.stats.failed, result.stats.unsolved) == (1, 1, 1)

    failed = asyncio.run(tracker.load_workbook(2052, "failed"))
    assert failed.next_problem.problem_id == 9095


def test_load_workbook_reports_fetch_errors(mocker, store):
    mocker.patch(
        "bojtrack.workbook.fetch_text",
        new=AsyncMock(side_effect=FetchError("Failed to fetch: HTTP 404", status_code=404)),
    )

    result = asyncio.run(make_tracker(store).load_workbook(1))

    assert not result.success
    assert result.error == "boj: Failed to fetch: HTTP 404"
    assert result.workbook_id == 1


def test_update_status_and_reset(store):
    tracker = make_tracker(store)

    updated = asyncio.run(tracker.update_status(3, 1000, "failed"))
    assert updated.success
    assert updated.progress.problems[1000].attempt_count == 1

    reset = asyncio.run(tracker.reset(3))
    assert reset.success
    assert reset.progress.problems == {}
    assert store.load(3).problems == {}


def test_storage_errors_become_results(tmp_path):
    from bojtrack.storage import ProgressStore

    tracker = make_tracker(ProgressStore(start_dir=tmp_path))
    result = asyncio.run(tracker.update_status(3, 1000, ProblemStatus.SOLVED))

    assert not result.success
    assert result.error.startswith("boj: Could not find the project root")
