import logging

from .base import BaseScraper
from .enrich import Lookup, enrich_problems
from .models import (
    ProblemStatus,
    ProgressResult,
    ScraperConfig,
    WorkbookResult,
)
from .selection import SelectionMode, select_next, summarize
from .storage import ProgressStore
from .workbook import WorkbookScraper

logger = logging.getLogger(__name__)


class WorkbookTracker(BaseScraper):
    def __init__(
        self,
        config: ScraperConfig | None = None,
        store: ProgressStore | None = None,
        lookup: Lookup | None = None,
    ):
        super().__init__(config)
        self.store = store or ProgressStore()
        self.lookup = lookup

    @property
    def site_name(self) -> str:
        return "boj"

    async def load_workbook(
        self, workbook_id: int, mode: SelectionMode | str = SelectionMode.SEQUENTIAL
    ) -> WorkbookResult:
        async def impl(wid: int) -> WorkbookResult:
            workbook = await WorkbookScraper(self.config).scrape_workbook(wid)
            progress = self.store.load(wid)
            problems = await enrich_problems(
                workbook.problems,
                lookup=self.lookup,
                batch_size=self.config.batch_size,
                delay_seconds=self.config.batch_delay_seconds,
            )
            workbook = workbook.model_copy(update={"problems": problems})
            return WorkbookResult(
                success=True,
                error="",
                workbook_id=wid,
                workbook=workbook,
                stats=summarize(workbook, progress),
                next_problem=select_next(workbook, progress, mode),
            )

        return await self._safe_execute("workbook", impl, workbook_id)

    async def update_status(
        self, workbook_id: int, problem_id: int, status: ProblemStatus | str
    ) -> ProgressResult:
        async def impl(wid: int) -> ProgressResult:
            entry = self.store.update_status(wid, problem_id, status)
            logger.info(
                "Workbook %s problem %s -> %s (attempts: %d)",
                wid,
                problem_id,
                entry.status.value,
                entry.attempt_count,
            )
            return ProgressResult(
                success=True, error="", workbook_id=wid, progress=self.store.load(wid)
            )

        return await self._safe_execute("progress", impl, workbook_id)

    async def reset(self, workbook_id: int) -> ProgressResult:
        async def impl(wid: int) -> ProgressResult:
            progress = self.store.reset(wid)
            return ProgressResult(success=True, error="", workbook_id=wid, progress=progress)

        return await self._safe_execute("progress", impl, workbook_id)
