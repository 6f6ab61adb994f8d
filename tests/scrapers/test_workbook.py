import asyncio
from unittest.mock import AsyncMock

import pytest

from bojtrack.errors import ExtractionError
from bojtrack.workbook import parse_workbook, scrape_workbook, workbook_url


def test_workbook_url():
    assert workbook_url(2052) == "https://www.acmicpc.net/workbook/view/2052"


def test_parse_workbook_fixture(fixture_text):
    wb = parse_workbook(fixture_text("boj_workbook.html"), 2052)

    assert wb.id == 2052
    assert wb.title == "기초 DP"
    assert [p.problem_id for p in wb.problems] == [1463, 9095, 11726]
    assert [p.order for p in wb.problems] == [1, 2, 3]
    assert wb.problems[1].title == "1, 2, 3 더하기"
    assert all(p.level is None for p in wb.problems)


def test_problem_id_from_link_and_duplicates():
    html = """
    <table><tbody>
      <tr><td><a href="/problem/2557">#</a></td><td>Hello World</td></tr>
      <tr><td>2557</td><td><a href="/problem/2557">Hello World</a></td></tr>
      <tr><td>x</td><td><a href="/problem/10718">We love kriii</a></td></tr>
      <tr><td>only one cell</td></tr>
    </tbody></table>
    """
    wb = parse_workbook(html, 5)

    assert [p.problem_id for p in wb.problems] == [2557, 10718]
    assert wb.problems[0].title == "Hello World"
    assert wb.title == "Workbook 5"


def test_empty_workbook_raises():
    with pytest.raises(ExtractionError, match="No problems found in workbook 9"):
        parse_workbook("<html><body><h1>Empty</h1></body></html>", 9)


def test_scrape_workbook_fetches_page(mocker, fixture_text):
    fetch = mocker.patch(
        "bojtrack.workbook.fetch_text",
        new=AsyncMock(return_value=fixture_text("boj_workbook.html")),
    )

    wb = asyncio.run(scrape_workbook(2052))

    assert len(wb.problems) == 3
    assert fetch.await_args.args[1] == workbook_url(2052)


def test_link_title_keeps_inline_spacing():
    html = """
    <div class="page-header"><h1>기초 <small>DP</small></h1></div>
    <table><tbody>
      <tr><td>1000</td><td><a href="/problem/1000">A <b>plus</b> B</a></td></tr>
    </tbody></table>
    """
    wb = parse_workbook(html, 1)

    assert wb.title == "기초 DP"
    assert wb.problems[0].title == "A plus B"
