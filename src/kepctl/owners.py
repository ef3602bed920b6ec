"""OWNERS records seeded into each release stage directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from kepctl.exceptions import ReleaseIOError
from kepctl.records import dump_yaml

OWNERS_FILENAME = "OWNERS"
ENHANCEMENT_TEAM_ROLE = "Enhancement Team"
RELEASE_LEAD_ROLE = "Release Lead"
DEFAULT_REVIEWERS: tuple[str, ...] = ("release-team",)


@dataclass(frozen=True)
class OwnersFile:
    approvers: tuple[str, ...]
    reviewers: tuple[str, ...] = DEFAULT_REVIEWERS

    def to_payload(self) -> dict[str, list[str]]:
        payload: dict[str, list[str]] = {}
        if self.approvers:
            payload["approvers"] = list(self.approvers)
        if self.reviewers:
            payload["reviewers"] = list(self.reviewers)
        return payload


def _role_entries(people: Iterable[str], role: str) -> list[str]:
    return [f"{person} // {role}" for person in people]


def build_owners(
    enhancement_team: Iterable[str],
    release_leads: Iterable[str],
) -> OwnersFile:
    approvers = [
        *_role_entries(enhancement_team, ENHANCEMENT_TEAM_ROLE),
        *_role_entries(release_leads, RELEASE_LEAD_ROLE),
    ]
    return OwnersFile(approvers=tuple(sorted(approvers)))


def encode_owners(owners: OwnersFile) -> bytes:
    return dump_yaml(owners.to_payload())


def save_owners(owners: OwnersFile, directory: Path) -> Path:
    path = directory / OWNERS_FILENAME
    try:
        path.write_bytes(encode_owners(owners))
    except OSError as exc:
        raise ReleaseIOError(f"unable to write owners file {path}: {exc}") from exc
    return path
