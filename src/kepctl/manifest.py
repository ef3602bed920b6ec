"""Aggregation of per-stage proposal records into the release manifest."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping

import typer

from kepctl.exceptions import (
    DuplicateProposalError,
    ManifestError,
    RecordDecodeError,
    ReleaseIOError,
)
from kepctl.layout import require_release
from kepctl.records import ReleaseContent, dump_yaml, read_record, record_identifier
from kepctl.versions import parse_version

MANIFEST_FILENAME = "manifest.yaml"
MANIFEST_HEADER = (
    "### THIS FILE IS AUTOGENERATED ###\n"
    "# To regenerate run kepctl generate-manifest\n"
    "\n"
)

# Manifest key order. The exception stage is not part of the manifest.
MANIFEST_STAGES: tuple[str, ...] = ("proposed", "accepted", "at-risk", "removed")


@dataclass(frozen=True)
class ReleaseManifest:
    release: str
    stages: Mapping[str, tuple[ReleaseContent, ...]]

    def identifiers(self, stage: str) -> list[str]:
        return [record.kep for record in self.stages.get(stage, ())]

    def to_payload(self) -> dict[str, list[dict[str, str]]]:
        return {
            stage: [
                dict(sorted(record.to_payload().items()))
                for record in self.stages.get(stage, ())
            ]
            for stage in MANIFEST_STAGES
        }


def _stage_record_paths(release: str, stage: str, directory: Path) -> list[tuple[str, Path]]:
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise ReleaseIOError(
            f"unable to read {stage} metadata for release {release}: {exc}"
        ) from exc
    found: list[tuple[str, Path]] = []
    for entry in entries:
        identifier = record_identifier(entry.name)
        if identifier is None or not entry.is_file():
            continue
        found.append((identifier, entry))
    # Listing order is platform dependent; identifiers define the order.
    return sorted(found, key=lambda item: item[0])


def load_stage(release: str, stage: str, directory: Path) -> tuple[ReleaseContent, ...]:
    records: list[ReleaseContent] = []
    for identifier, path in _stage_record_paths(release, stage, directory):
        try:
            record = read_record(path)
        except RecordDecodeError as exc:
            raise ManifestError(
                f"error loading {stage} KEP for release {release}: {exc}",
                release=release,
                stage=stage,
            ) from exc
        records.append(record.with_identifier(identifier))
    return tuple(records)


def find_duplicates(manifest: ReleaseManifest) -> dict[str, tuple[str, ...]]:
    seen: dict[str, list[str]] = {}
    for stage in MANIFEST_STAGES:
        for identifier in manifest.identifiers(stage):
            seen.setdefault(identifier, []).append(stage)
    return {
        identifier: tuple(stages)
        for identifier, stages in seen.items()
        if len(stages) > 1
    }


def build_manifest(release_root: Path, release: str) -> ReleaseManifest:
    stages = {
        stage: load_stage(release, stage, release_root / stage)
        for stage in MANIFEST_STAGES
    }
    return ReleaseManifest(release=release, stages=stages)


def render_manifest(manifest: ReleaseManifest) -> bytes:
    body = dump_yaml(manifest.to_payload(), sort_keys=False)
    return MANIFEST_HEADER.encode("utf-8") + body


def _replace_file(path: Path, payload: bytes) -> None:
    tmp = path.parent / (path.name + ".tmp")
    try:
        tmp.write_bytes(payload)
        tmp.replace(path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise ReleaseIOError(f"unable to generate release manifest {path}: {exc}") from exc


def generate_manifest(
    repo_root: Path,
    release: str,
    *,
    check_duplicates: bool = False,
    echo_fn: Callable[[str], None] = typer.echo,
) -> Path:
    """Rebuild ``manifest.yaml`` for a release from its stage directories.

    Nothing is written unless every record in every aggregated stage decodes.
    """
    name = parse_version(release).original
    root = require_release(repo_root, name)
    manifest = build_manifest(root, name)
    if check_duplicates:
        duplicates = find_duplicates(manifest)
        if duplicates:
            raise DuplicateProposalError(name, duplicates)
    path = root / MANIFEST_FILENAME
    _replace_file(path, render_manifest(manifest))
    counts = ", ".join(
        f"{stage}={len(manifest.stages[stage])}" for stage in MANIFEST_STAGES
    )
    echo_fn(f"Generated release manifest for {name} at {path} ({counts})")
    return path
