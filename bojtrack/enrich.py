import asyncio
import logging
from typing import Awaitable, Callable

from .models import SolvedAcProblem, WorkbookProblem
from .solvedac import SolvedAcClient

logger = logging.getLogger(__name__)

Lookup = Callable[[int], Awaitable[SolvedAcProblem]]

BATCH_SIZE = 10
BATCH_DELAY_S = 0.2


async def _enrich_one(problem: WorkbookProblem, lookup: Lookup) -> WorkbookProblem:
    try:
        data = await lookup(problem.problem_id)
    except Exception as e:
        logger.warning(
            "Could not fetch tier for problem %s: %s", problem.problem_id, e
        )
        return problem
    return problem.model_copy(update={"level": data.level})


async def enrich_problems(
    problems: list[WorkbookProblem],
    lookup: Lookup | None = None,
    batch_size: int = BATCH_SIZE,
    delay_seconds: float = BATCH_DELAY_S,
) -> list[WorkbookProblem]:
    """Attach solved.ac tier levels to ``problems``.

    Lookups run ``batch_size`` at a time with a pause of ``delay_seconds``
    between batches. A failed lookup leaves that problem as it was. The
    result has the same length and order as the input.
    """
    if lookup is None:
        async with SolvedAcClient() as client:
            return await enrich_problems(
                problems, client.get_problem, batch_size, delay_seconds
            )

    enriched: list[WorkbookProblem] = []
    for start in range(0, len(problems), batch_size):
        batch = problems[start : start + batch_size]
        enriched.extend(await asyncio.gather(*(_enrich_one(p, lookup) for p in batch)))
        if start + batch_size < len(problems):
            await asyncio.sleep(delay_seconds)
    return enriched

