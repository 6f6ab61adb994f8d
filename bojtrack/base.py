import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ParamSpec, cast

import httpx

from .errors import BojTrackError, FetchError
from .models import (
    ProblemResult,
    ProgressResult,
    ScraperConfig,
    SearchPageResult,
    WorkbookResult,
)

P = ParamSpec("P")

logger = logging.getLogger(__name__)

BOJ_BASE_URL = "https://www.acmicpc.net"
SOLVED_AC_BASE_URL = "https://solved.ac"
HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
}
TIMEOUT_S = 15.0


async def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float = TIMEOUT_S,
) -> str:
    logger.debug("GET %s params=%s", url, params)
    try:
        r = await client.get(url, params=params, headers=HEADERS, timeout=timeout)
        r.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise FetchError(
            f"Failed to fetch {url}: HTTP {status}", url=url, status_code=status
        ) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e
    return r.text


class BaseScraper(ABC):
    def __init__(self, config: ScraperConfig | None = None):
        self.config = config or ScraperConfig()

    @property
    @abstractmethod
    def site_name(self) -> str: ...

    def _create_problem_error(self, error_msg: str, problem_id: int = 0) -> ProblemResult:
        return ProblemResult(
            success=False,
            error=f"{self.site_name}: {error_msg}",
            problem_id=problem_id,
        )

    def _create_search_error(self, error_msg: str, query: str = "") -> SearchPageResult:
        return SearchPageResult(
            success=False,
            error=f"{self.site_name}: {error_msg}",
            query=query,
        )

    def _create_workbook_error(
        self, error_msg: str, workbook_id: int = 0
    ) -> WorkbookResult:
        return WorkbookResult(
            success=False,
            error=f"{self.site_name}: {error_msg}",
            workbook_id=workbook_id,
        )

    def _create_progress_error(
        self, error_msg: str, workbook_id: int = 0
    ) -> ProgressResult:
        return ProgressResult(
            success=False,
            error=f"{self.site_name}: {error_msg}",
            workbook_id=workbook_id,
        )

    async def _safe_execute(
        self,
        operation: str,
        func: Callable[P, Awaitable[Any]],
        *args: P.args,
        **kwargs: P.kwargs,
    ):
        try:
            return await func(*args, **kwargs)
        except BojTrackError as e:
            if operation == "problem":
                problem_id = cast(int, args[0]) if args else 0
                return self._create_problem_error(str(e), problem_id)
            elif operation == "search":
                query = cast(str, args[0]) if args else ""
                return self._create_search_error(str(e), query)
            elif operation == "workbook":
                workbook_id = cast(int, args[0]) if args else 0
                return self._create_workbook_error(str(e), workbook_id)
            elif operation == "progress":
                workbook_id = cast(int, args[0]) if args else 0
                return self._create_progress_error(str(e), workbook_id)
            else:
                raise
