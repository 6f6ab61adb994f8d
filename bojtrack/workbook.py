import logging
import re

import httpx
from bs4 import BeautifulSoup, Tag

from .base import BOJ_BASE_URL, BaseScraper, fetch_text
from .errors import ExtractionError
from .models import Workbook, WorkbookProblem, utcnow

logger = logging.getLogger(__name__)

WORKBOOK_PATH = "/workbook/view/{id}"
TITLE_SELECTORS = (".page-header h1", "h1", "title")
PROBLEM_HREF_RE = re.compile(r"/problem/(\d+)")


def workbook_url(workbook_id: int | str) -> str:
    return BOJ_BASE_URL + WORKBOOK_PATH.format(id=workbook_id)


def _parse_title(soup: BeautifulSoup, workbook_id: int) -> str:
    for selector in TITLE_SELECTORS:
        el = soup.select_one(selector)
        if el is not None:
            title = el.get_text().strip()
            if title:
                return title
    return f"Workbook {workbook_id}"


def _row_problem_id(cells: list[Tag]) -> int | None:
    text = cells[0].get_text().strip()
    if text.isdigit() and int(text) > 0:
        return int(text)
    for a in cells[0].find_all("a") + cells[1].find_all("a"):
        href = a.get("href")
        m = PROBLEM_HREF_RE.search(href) if isinstance(href, str) else None
        if m:
            return int(m.group(1))
    return None


def _row_title(cell: Tag, problem_id: int) -> str:
    link = cell.select_one("a[href^='/problem/']")
    title = link.get_text().strip() if link is not None else ""
    return title or cell.get_text().strip() or f"Problem {problem_id}"


def parse_workbook(html: str, workbook_id: int) -> Workbook:
    soup = BeautifulSoup(html, "html.parser")

    problems: list[WorkbookProblem] = []
    seen: set[int] = set()
    for tr in soup.select("table tbody tr"):
        cells = tr.find_all("td")
        if len(cells) < 2:
            continue
        pid = _row_problem_id(cells)
        if pid is None or pid in seen:
            continue
        seen.add(pid)
        problems.append(
            WorkbookProblem(
                problem_id=pid,
                title=_row_title(cells[1], pid),
                order=len(problems) + 1,
            )
        )

    if not problems:
        raise ExtractionError(
            f"No problems found in workbook {workbook_id}. "
            "The BOJ page structure may have changed or the workbook may not exist."
        )

    return Workbook(
        id=workbook_id,
        title=_parse_title(soup, workbook_id),
        problems=problems,
        created_at=utcnow(),
    )


class WorkbookScraper(BaseScraper):
    @property
    def site_name(self) -> str:
        return "boj"

    async def scrape_workbook(self, workbook_id: int) -> Workbook:
        async with httpx.AsyncClient() as client:
            html = await fetch_text(
                client, workbook_url(workbook_id), timeout=self.config.timeout_seconds
            )
        workbook = parse_workbook(html, workbook_id)
        logger.debug(
            "Parsed workbook %s: %d problems", workbook_id, len(workbook.problems)
        )
        return workbook


async def scrape_workbook(workbook_id: int) -> Workbook:
    return await WorkbookScraper().scrape_workbook(workbook_id)
