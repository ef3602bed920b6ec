"""Resolution of the enhancements repository root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from kepctl.config import KepctlConfig
from kepctl.exceptions import RepoNotFoundError

REPO_PATH_ENV = "ENHANCEMENTS_PATH"


def find_enhancements_repo(
    repo_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    config: KepctlConfig | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the absolute enhancements root.

    Precedence: explicit path, ``ENHANCEMENTS_PATH``, configured
    ``repo_path``, then the working directory.
    """
    environ = os.environ if env is None else env
    candidate: Path
    source: str
    if repo_path is not None:
        candidate, source = repo_path, "--repo-path"
    elif environ.get(REPO_PATH_ENV, "").strip():
        candidate, source = Path(environ[REPO_PATH_ENV].strip()), REPO_PATH_ENV
    elif config is not None and config.repo_path is not None:
        candidate, source = config.repo_path, "repo_path"
    else:
        candidate, source = (cwd if cwd is not None else Path.cwd()), "working directory"
    candidate = candidate.expanduser()
    if not candidate.exists():
        raise RepoNotFoundError(f"unable to find enhancements repo ({source}): {candidate} does not exist")
    if not candidate.is_dir():
        raise RepoNotFoundError(f"unable to find enhancements repo ({source}): {candidate} is not a directory")
    return candidate.resolve()
