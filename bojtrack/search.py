import copy
import logging
import math
import re

import httpx
from bs4 import BeautifulSoup, Tag

from .base import SOLVED_AC_BASE_URL, BaseScraper, fetch_text
from .models import SearchPageResult, SearchResult, SearchResults

logger = logging.getLogger(__name__)

SEARCH_URL = f"{SOLVED_AC_BASE_URL}/problems"

LONG_ID_RE = re.compile(r"\d{4,}")
ANY_DIGITS_RE = re.compile(r"\d+")
TIER_RE = re.compile(r"tier_small/(\d+)\.svg")
PAGE_RE = re.compile(r"[?&]page=(\d+)")
BADGE_RE = re.compile(
    r"\s+(STANDARD|CLASS|NORMAL|EASY|MEDIUM|HARD|EXPERT|MASTER|CLASSIC)\s*$",
    re.IGNORECASE,
)
CSS_CLASS_RE = re.compile(r"\s*\.css-[a-z0-9-]+\s*")
MAX_LEVEL = 31


def _parse_problem_id(text: str) -> int | None:
    # ids are almost always 4+ digits; tier labels and decorations are shorter
    long_runs = LONG_ID_RE.findall(text)
    if long_runs:
        raw = max(long_runs, key=len)
    else:
        m = ANY_DIGITS_RE.search(text)
        raw = m.group(0) if m else text
    try:
        pid = int(raw)
    except ValueError:
        return None
    return pid if pid > 0 else None


def _parse_level(cell: Tag) -> int | None:
    img = cell.select_one("img[src*='tier_small']")
    if img is None:
        return None
    src = img.get("src")
    if not isinstance(src, str):
        return None
    m = TIER_RE.search(src)
    if not m:
        return None
    level = int(m.group(1))
    return level if 0 <= level <= MAX_LEVEL else None


def _strip_badges(text: str) -> str:
    return BADGE_RE.sub("", text).strip()


def _parse_title(cell: Tag, problem_id: int) -> str:
    link = cell.find("a")
    title = link.get_text().strip() if isinstance(link, Tag) else ""
    if title:
        return title

    bare = copy.copy(cell)
    for el in bare.select("span, div, [class*='css-']"):
        el.extract()
    title = CSS_CLASS_RE.sub("", _strip_badges(bare.get_text().strip())).strip()
    if title:
        return title

    title = _strip_badges(cell.get_text().strip())
    return title or f"Problem {problem_id}"


def _parse_int(text: str) -> int | None:
    raw = text.replace(",", "")
    return int(raw) if raw.isdecimal() else None


def _parse_float(text: str) -> float | None:
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_row(cells: list[Tag]) -> SearchResult | None:
    problem_id = _parse_problem_id(cells[0].get_text().strip())
    if problem_id is None:
        return None
    return SearchResult(
        problem_id=problem_id,
        title=_parse_title(cells[1], problem_id),
        level=_parse_level(cells[0]),
        solved_count=_parse_int(cells[2].get_text().strip()) if len(cells) > 2 else None,
        average_tries=_parse_float(cells[3].get_text().strip()) if len(cells) > 3 else None,
    )


def _parse_total_pages(soup: BeautifulSoup, result_count: int) -> int:
    pages: list[int] = []
    for a in soup.select("a[href*='page=']"):
        href = a.get("href")
        if not isinstance(href, str):
            continue
        m = PAGE_RE.search(href)
        if m:
            pages.append(int(m.group(1)))
    if pages:
        return max(pages)
    return 1 if result_count > 0 else 0


def parse_search_results(html: str, page: int = 1) -> SearchResults:
    soup = BeautifulSoup(html, "html.parser")
    rows = soup.select("tbody tr") or soup.select("tr")

    problems: list[SearchResult] = []
    seen: set[int] = set()
    for tr in rows:
        cells = tr.find_all("td")
        if len(cells) < 2:
            continue
        result = _parse_row(cells)
        if result is None or result.problem_id in seen:
            continue
        seen.add(result.problem_id)
        problems.append(result)

    return SearchResults(
        problems=problems,
        current_page=page,
        total_pages=_parse_total_pages(soup, len(problems)),
    )


class SearchScraper(BaseScraper):
    @property
    def site_name(self) -> str:
        return "solved.ac"

    async def search(self, query: str, page: int = 1) -> SearchResults:
        async with httpx.AsyncClient() as client:
            html = await fetch_text(
                client,
                SEARCH_URL,
                params={"query": query, "page": page},
                timeout=self.config.timeout_seconds,
            )
        results = parse_search_results(html, page)
        logger.debug(
            "Search %r page %d: %d results of %d pages",
            query,
            page,
            len(results.problems),
            results.total_pages,
        )
        return results

    async def search_result(self, query: str, page: int = 1) -> SearchPageResult:
        async def impl(q: str, p: int) -> SearchPageResult:
            results = await self.search(q, p)
            return SearchPageResult(success=True, error="", query=q, results=results)

        return await self._safe_execute("search", impl, query, page)
