"""On-disk layout of a release: the stage directories and their OWNERS."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import shutil
from typing import Callable, Iterable, Mapping

import typer

from kepctl.exceptions import (
    ReleaseExistsError,
    ReleaseIOError,
    ReleaseNotFoundError,
    ValidationError,
)
from kepctl.owners import build_owners, save_owners
from kepctl.versions import parse_version

RELEASES_DIRNAME = "releases"

# Creation order for a new release.
STAGE_DIRECTORIES: tuple[str, ...] = (
    "accepted",
    "exception",
    "proposed",
    "at-risk",
    "removed",
)
PROPOSED_STAGE = "proposed"


@dataclass(frozen=True)
class ReleaseLayout:
    release: str
    root: Path
    stages: Mapping[str, Path]


def release_path(repo_root: Path, release: str) -> Path:
    return repo_root / RELEASES_DIRNAME / release


def stage_path(repo_root: Path, release: str, stage: str) -> Path:
    if stage not in STAGE_DIRECTORIES:
        raise ValidationError(
            f"unknown stage directory {stage!r}; expected one of {', '.join(STAGE_DIRECTORIES)}"
        )
    return release_path(repo_root, release) / stage


def require_release(repo_root: Path, release: str) -> Path:
    root = release_path(repo_root, release)
    if not root.is_dir():
        raise ReleaseNotFoundError(release, root)
    return root


def normalize_people(people: Iterable[str]) -> list[str]:
    return [person.strip() for person in people if person and person.strip()]


def _rollback(created: list[Path], echo_fn: Callable[[str], None]) -> None:
    for path in reversed(created):
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            echo_fn(f"===> unable to clean up {path}: {exc}")


def init_release(
    repo_root: Path,
    release: str,
    enhancement_team: Iterable[str],
    release_leads: Iterable[str],
    *,
    echo_fn: Callable[[str], None] = typer.echo,
) -> ReleaseLayout:
    """Create the stage directories of a new release and seed their OWNERS.

    Every stage directory must be absent; an initialized release is never
    touched again. Directories created by a failing call are removed on a
    best-effort basis before the error propagates.
    """
    version = parse_version(release)
    team = normalize_people(enhancement_team)
    leads = normalize_people(release_leads)
    if not team:
        raise ValidationError("at least one enhancement team member must be provided")
    if not leads:
        raise ValidationError("at least one release lead must be provided")

    name = version.original
    root = release_path(repo_root, name)
    stages = {stage: root / stage for stage in STAGE_DIRECTORIES}
    existing = [path for path in stages.values() if path.exists()]
    if existing:
        raise ReleaseExistsError(name, existing)

    owners = build_owners(team, leads)
    created: list[Path] = []
    try:
        releases = root.parent
        if not releases.exists():
            releases.mkdir(parents=True)
            created.append(releases)
        if not root.exists():
            root.mkdir()
            created.append(root)
        for stage, path in stages.items():
            echo_fn(f"===> creating {name} {stage} directory: {path}")
            try:
                path.mkdir()
            except OSError as exc:
                raise ReleaseIOError(
                    f"unable to create {stage} directory for release {name}: {exc}"
                ) from exc
            created.append(path)
        for path in stages.values():
            save_owners(owners, path)
    except OSError as exc:
        _rollback(created, echo_fn)
        raise ReleaseIOError(f"unable to create release directory {root}: {exc}") from exc
    except ReleaseIOError:
        _rollback(created, echo_fn)
        raise
    return ReleaseLayout(release=name, root=root, stages=stages)
