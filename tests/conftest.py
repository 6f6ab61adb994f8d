import json
from pathlib import Path

import pytest

from bojtrack.storage import PROJECT_MARKER, ProgressStore

FIX = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixture_text():
    def _load(name: str) -> str:
        p = FIX / name
        return p.read_text(encoding="utf-8")

    return _load


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / PROJECT_MARKER).write_text(json.dumps({"language": "python"}))
    return tmp_path


@pytest.fixture
def store(project_dir: Path) -> ProgressStore:
    return ProgressStore(root=project_dir)
