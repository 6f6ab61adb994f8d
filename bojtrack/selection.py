from datetime import datetime
from enum import Enum

from .models import (
    ProblemProgress,
    ProblemStatus,
    ProgressStats,
    Workbook,
    WorkbookProblem,
    WorkbookProgress,
)


class SelectionMode(str, Enum):
    SEQUENTIAL = "sequential"
    UNSOLVED = "unsolved"
    FAILED = "failed"


def _entry(progress: WorkbookProgress, problem: WorkbookProblem) -> ProblemProgress | None:
    return progress.problems.get(problem.problem_id)


def _is_open(progress: WorkbookProgress, problem: WorkbookProblem) -> bool:
    entry = _entry(progress, problem)
    return entry is None or entry.status == ProblemStatus.UNSOLVED


def _is_failed(progress: WorkbookProgress, problem: WorkbookProblem) -> bool:
    entry = _entry(progress, problem)
    return entry is not None and entry.status == ProblemStatus.FAILED


def _recency_key(progress: WorkbookProgress, problem: WorkbookProblem) -> tuple[int, float]:
    entry = _entry(progress, problem)
    attempted: datetime | None = entry.last_attempted_at if entry else None
    if attempted is None:
        return (1, 0.0)
    return (0, -attempted.timestamp())


def select_next(
    workbook: Workbook,
    progress: WorkbookProgress,
    mode: SelectionMode | str = SelectionMode.SEQUENTIAL,
) -> WorkbookProblem | None:
    """Pick the problem to present next.

    ``sequential`` and ``unsolved`` both return the lowest-``order`` problem
    with no recorded status or status ``unsolved``. ``failed`` returns the
    most recently attempted failed problem; failed problems without a
    timestamp come last in workbook list order.
    """
    mode = SelectionMode(mode)

    if mode in (SelectionMode.SEQUENTIAL, SelectionMode.UNSOLVED):
        candidates = sorted(
            (p for p in workbook.problems if _is_open(progress, p)),
            key=lambda p: p.order,
        )
    else:
        candidates = sorted(
            (p for p in workbook.problems if _is_failed(progress, p)),
            key=lambda p: _recency_key(progress, p),
        )

    return candidates[0] if candidates else None


def summarize(workbook: Workbook, progress: WorkbookProgress) -> ProgressStats:
    total = len(workbook.problems)
    solved = failed = 0
    for problem in workbook.problems:
        entry = _entry(progress, problem)
        if entry is None:
            continue
        if entry.status == ProblemStatus.SOLVED:
            solved += 1
        elif entry.status == ProblemStatus.FAILED:
            failed += 1

    return ProgressStats(
        total=total,
        solved=solved,
        failed=failed,
        unsolved=total - solved - failed,
        percentage=round(solved / total * 100) if total else 0,
    )
