from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


import pytest

from kepctl.layout import STAGE_DIRECTORIES


@pytest.fixture
def echo_lines() -> list[str]:
    return []


@pytest.fixture
def echo_fn(echo_lines: list[str]):
    return echo_lines.append


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    root = tmp_path / "enhancements"
    root.mkdir()
    return root


@pytest.fixture
def release_root(repo_root: Path) -> Path:
    root = repo_root / "releases" / "v1.21"
    for stage in STAGE_DIRECTORIES:
        (root / stage).mkdir(parents=True)
    return root
