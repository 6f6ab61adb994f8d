import logging

import backoff
import httpx
import pydantic

from .base import HEADERS, SOLVED_AC_BASE_URL
from .errors import FetchError
from .models import ScraperConfig, SolvedAcProblem

logger = logging.getLogger(__name__)

API_BASE_URL = f"{SOLVED_AC_BASE_URL}/api/v3"
PROBLEM_SHOW_URL = f"{API_BASE_URL}/problem/show"
RATE_LIMITED = 429


class SolvedAcClient:
    def __init__(
        self,
        config: ScraperConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ScraperConfig()
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": HEADERS["User-Agent"]},
            timeout=self.config.timeout_seconds,
        )

    async def __aenter__(self) -> "SolvedAcClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @backoff.on_predicate(
        backoff.expo,
        lambda response: response.status_code == RATE_LIMITED,
        max_tries=3,
        base=2.0,
        jitter=backoff.random_jitter,
    )
    async def _get(self, url: str, params: dict[str, str | int]) -> httpx.Response:
        try:
            return await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

    async def get_problem(self, problem_id: int) -> SolvedAcProblem:
        r = await self._get(PROBLEM_SHOW_URL, {"problemId": problem_id})
        if not r.is_success:
            raise FetchError(
                f"solved.ac lookup for problem {problem_id} failed: HTTP {r.status_code}",
                url=PROBLEM_SHOW_URL,
                status_code=r.status_code,
            )
        try:
            return SolvedAcProblem.model_validate_json(r.content)
        except pydantic.ValidationError as e:
            raise FetchError(
                f"solved.ac returned an unexpected payload for problem {problem_id}",
                url=PROBLEM_SHOW_URL,
            ) from e
