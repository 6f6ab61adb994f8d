#!/usr/bin/env python3

import asyncio
import logging
import sys

from .models import ProblemStatus, ScrapingResult
from .problem import ProblemScraper
from .search import SearchScraper
from .selection import SelectionMode
from .tracker import WorkbookTracker

USAGE = (
    "Usage: bojtrack problem <problem_id> | search <query> [page] | "
    "workbook <workbook_id> [sequential|unsolved|failed] | "
    "status <workbook_id> <problem_id> <unsolved|solved|failed> | "
    "reset <workbook_id>"
)
ARITY = {
    "problem": (1, 1),
    "search": (1, 2),
    "workbook": (1, 2),
    "status": (3, 3),
    "reset": (1, 1),
}


def _fail(error: str) -> int:
    print(ScrapingResult(success=False, error=error).model_dump_json())
    return 1


def _emit(result: ScrapingResult) -> int:
    print(result.model_dump_json())
    return 0 if result.success else 1


async def main_async() -> int:
    if len(sys.argv) < 2:
        return _fail(USAGE)

    mode: str = sys.argv[1]
    args = sys.argv[2:]
    if mode not in ARITY:
        return _fail(f"Unknown mode: {mode}. {USAGE}")
    lo, hi = ARITY[mode]
    if not lo <= len(args) <= hi:
        return _fail(USAGE)

    try:
        if mode == "problem":
            problem_id = int(args[0])
        elif mode == "search":
            query = args[0]
            page = int(args[1]) if len(args) == 2 else 1
        elif mode == "workbook":
            workbook_id = int(args[0])
            selection = SelectionMode(args[1]) if len(args) == 2 else SelectionMode.SEQUENTIAL
        elif mode == "status":
            workbook_id, problem_id = int(args[0]), int(args[1])
            status = ProblemStatus(args[2])
        else:
            workbook_id = int(args[0])
    except ValueError as e:
        return _fail(f"Invalid argument: {e}")

    if mode == "problem":
        return _emit(await ProblemScraper().scrape_problem_result(problem_id))
    if mode == "search":
        return _emit(await SearchScraper().search_result(query, page))
    if mode == "workbook":
        return _emit(await WorkbookTracker().load_workbook(workbook_id, selection))
    if mode == "status":
        return _emit(await WorkbookTracker().update_status(workbook_id, problem_id, status))
    return _emit(await WorkbookTracker().reset(workbook_id))


def main() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
