import logging
import re
from typing import Callable

import httpx
from bs4 import BeautifulSoup, Tag

from .base import BOJ_BASE_URL, BaseScraper, fetch_text
from .errors import ExtractionError
from .markdown import html_to_markdown
from .models import ProblemResult, ScrapedProblem, TestCase

logger = logging.getLogger(__name__)

PROBLEM_PATH = "/problem/{id}"

TITLE_SELECTOR = "#problem_title"
SECTION_SELECTORS: dict[str, tuple[str, ...]] = {
    "description": ("#problem_description", '[id*="description"]'),
    "input_format": ("#problem_input", '[id*="input"]'),
    "output_format": ("#problem_output", '[id*="output"]'),
}
INFO_TABLE_SELECTORS = ("#problem-info", ".table-responsive table")

# first key present with a non-empty value wins
INFO_FIELDS: dict[str, tuple[str, ...]] = {
    "time_limit": ("시간 제한", "Time Limit"),
    "memory_limit": ("메모리 제한", "Memory Limit"),
    "submissions": ("제출", "Submit", "Submissions"),
    "accepted": ("정답", "Accepted"),
    "accepted_users": ("맞힌 사람", "Accepted Users", "Solved"),
    "accepted_rate": ("정답 비율", "Accepted Rate", "Ratio"),
}

SAMPLE_INPUT_RE = re.compile(r"^sample-input-(\d+)$")
INPUT_LABELS = ("입력", "input")

TextStrategy = Callable[[Tag], str]
TEXT_STRATEGIES: tuple[TextStrategy, ...] = (
    html_to_markdown,
    lambda el: el.get_text().strip(),
)


def problem_url(problem_id: int | str) -> str:
    return BOJ_BASE_URL + PROBLEM_PATH.format(id=problem_id)


def _text_from_pre(pre: Tag) -> str:
    return pre.get_text().replace("\r", "").replace("\xa0", " ").strip()


def _select_first(root: Tag, selectors: tuple[str, ...]) -> Tag | None:
    for selector in selectors:
        el = root.select_one(selector)
        if el is not None:
            return el
    return None


def _extract_section(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    el = _select_first(soup, selectors)
    if el is None:
        return ""
    for strategy in TEXT_STRATEGIES:
        text = strategy(el)
        if text:
            return text
    return ""


def _parse_info_table(soup: BeautifulSoup) -> dict[str, str]:
    table = _select_first(soup, INFO_TABLE_SELECTORS)
    if table is None:
        return {}

    info: dict[str, str] = {}
    header_row = table.select_one("thead tr")
    data_row = table.select_one("tbody tr")
    if header_row is not None and data_row is not None:
        headers = [th.get_text().strip() for th in header_row.find_all("th")]
        values = [td.get_text().strip() for td in data_row.find_all("td")]
        for header, value in zip(headers, values):
            if value:
                info[header] = value
        return info

    for tr in table.find_all("tr"):
        tds = tr.find_all("td")
        if len(tds) >= 2:
            info[tds[0].get_text().strip()] = tds[1].get_text().strip()
    return info


def _resolve_info_fields(info: dict[str, str]) -> dict[str, str | None]:
    out: dict[str, str | None] = {}
    for field, keys in INFO_FIELDS.items():
        out[field] = next((info[k] for k in keys if info.get(k)), None)
    return out


def _extract_samples_by_id(soup: BeautifulSoup) -> list[TestCase]:
    cases: list[TestCase] = []
    for el in soup.select(".sampledata"):
        el_id = el.get("id")
        if not isinstance(el_id, str):
            continue
        m = SAMPLE_INPUT_RE.match(el_id)
        if not m:
            continue
        out_el = soup.find(id=f"sample-output-{m.group(1)}")
        if not isinstance(out_el, Tag):
            continue
        cases.append(TestCase(input=_text_from_pre(el), output=_text_from_pre(out_el)))
    return cases


def _extract_samples_by_label(soup: BeautifulSoup) -> list[TestCase]:
    cases: list[TestCase] = []
    for pre in soup.find_all("pre"):
        prev = pre.find_previous_sibling()
        label = prev.get_text().lower() if isinstance(prev, Tag) else ""
        if not any(word in label for word in INPUT_LABELS):
            continue
        nxt = pre.find_next_sibling("pre")
        if isinstance(nxt, Tag):
            cases.append(TestCase(input=_text_from_pre(pre), output=_text_from_pre(nxt)))
    return cases


def _extract_samples(soup: BeautifulSoup) -> list[TestCase]:
    return _extract_samples_by_id(soup) or _extract_samples_by_label(soup)


def parse_problem(html: str, problem_id: int) -> ScrapedProblem:
    soup = BeautifulSoup(html, "html.parser")

    title_el = soup.select_one(TITLE_SELECTOR)
    title = title_el.get_text().strip() if title_el else ""
    if not title:
        raise ExtractionError(
            f"Could not find the title of problem {problem_id}. "
            "The BOJ page structure may have changed or the problem may not exist."
        )

    sections = {
        field: _extract_section(soup, selectors)
        for field, selectors in SECTION_SELECTORS.items()
    }
    if not any(sections.values()):
        raise ExtractionError(
            f"Could not read the statement of problem {problem_id}. "
            "The BOJ page structure may have changed or access may be rate limited; "
            "try again later."
        )

    info = _resolve_info_fields(_parse_info_table(soup))
    return ScrapedProblem(
        problem_id=problem_id,
        title=title,
        test_cases=_extract_samples(soup),
        **sections,
        **info,
    )


class ProblemScraper(BaseScraper):
    @property
    def site_name(self) -> str:
        return "boj"

    async def scrape_problem(self, problem_id: int) -> ScrapedProblem:
        async with httpx.AsyncClient() as client:
            html = await fetch_text(
                client, problem_url(problem_id), timeout=self.config.timeout_seconds
            )
        problem = parse_problem(html, problem_id)
        logger.debug(
            "Parsed problem %s (%d samples)", problem_id, len(problem.test_cases)
        )
        return problem

    async def scrape_problem_result(self, problem_id: int) -> ProblemResult:
        async def impl(pid: int) -> ProblemResult:
            problem = await self.scrape_problem(pid)
            return ProblemResult(success=True, error="", problem_id=pid, problem=problem)

        return await self._safe_execute("problem", impl, problem_id)
