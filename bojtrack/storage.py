"""Per-workbook progress persisted as JSON under the project root.

A project is any directory holding a ``.ps-cli.json`` marker; records live
at ``<root>/.ps-cli/workbooks/<workbook_id>.json``. Writes go through a
temporary file and ``os.replace`` so a crash never leaves a half-written
record. Saved records get the default file mode for the current umask.
There is no locking: concurrent writers race and the last one wins.
"""

import logging
import os
import tempfile
from pathlib import Path

import pydantic

from .errors import StorageError
from .models import ProblemProgress, ProblemStatus, WorkbookProgress, utcnow

logger = logging.getLogger(__name__)

PROJECT_MARKER = ".ps-cli.json"
WORKBOOKS_DIR = Path(".ps-cli") / "workbooks"

COUNTED_STATUSES = (ProblemStatus.SOLVED, ProblemStatus.FAILED)


def find_project_root(start_dir: Path | None = None) -> Path | None:
    current = (start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / PROJECT_MARKER).is_file():
            return directory
    return None


def _file_mode() -> int:
    # NamedTemporaryFile creates 0600; give the record the usual umask default
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


class ProgressStore:
    def __init__(self, root: Path | None = None, start_dir: Path | None = None):
        self._root = root
        self._start_dir = start_dir

    @property
    def root(self) -> Path:
        return self.resolve_root()

    def resolve_root(self, workbook_id: int | None = None) -> Path:
        root = self._root or find_project_root(self._start_dir)
        if root is None:
            target = f" for workbook {workbook_id}" if workbook_id is not None else ""
            raise StorageError(
                f"Could not find the project root{target} (no .ps-cli.json found). "
                "Run this inside a ps-cli project directory."
            )
        return root

    def path_for(self, workbook_id: int) -> Path:
        return self.resolve_root(workbook_id) / WORKBOOKS_DIR / f"{workbook_id}.json"

    def load(self, workbook_id: int) -> WorkbookProgress:
        path = self.path_for(workbook_id)
        if not path.exists():
            return WorkbookProgress(workbook_id=workbook_id)
        try:
            return WorkbookProgress.model_validate_json(path.read_bytes())
        except OSError as e:
            raise StorageError(
                f"Could not read progress for workbook {workbook_id} at {path}: {e}"
            ) from e
        except pydantic.ValidationError as e:
            raise StorageError(
                f"Progress file for workbook {workbook_id} at {path} is corrupt: {e}"
            ) from e

    def save(self, progress: WorkbookProgress) -> None:
        path = self.path_for(progress.workbook_id)
        progress.updated_at = utcnow()
        payload = progress.model_dump_json(by_alias=True, indent=2)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f".{progress.workbook_id}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload)
            os.chmod(tmp_name, _file_mode())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                f"Could not save progress for workbook {progress.workbook_id} at {path}: {e}"
            ) from e
        logger.debug("Saved progress for workbook %s", progress.workbook_id)

    def reset(self, workbook_id: int) -> WorkbookProgress:
        progress = WorkbookProgress(workbook_id=workbook_id)
        self.save(progress)
        return progress

    def update_status(
        self, workbook_id: int, problem_id: int, status: ProblemStatus | str
    ) -> ProblemProgress:
        status = ProblemStatus(status)
        progress = self.load(workbook_id)
        entry = progress.problems.setdefault(problem_id, ProblemProgress())

        previous = entry.status
        entry.status = status
        entry.last_attempted_at = utcnow()
        if previous != status and status in COUNTED_STATUSES:
            entry.attempt_count += 1

        self.save(progress)
        return entry


def get_workbook_progress(workbook_id: int) -> WorkbookProgress:
    return ProgressStore().load(workbook_id)


def update_problem_status(
    workbook_id: int, problem_id: int, status: ProblemStatus | str
) -> ProblemProgress:
    return ProgressStore().update_status(workbook_id, problem_id, status)


def reset_workbook_progress(workbook_id: int) -> WorkbookProgress:
    return ProgressStore().reset(workbook_id)
