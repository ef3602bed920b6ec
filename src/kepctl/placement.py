"""Placement of a proposal's metadata record into a release stage."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import typer

from kepctl.exceptions import PreconditionError, ValidationError
from kepctl.kep_ref import DEFAULT_ISSUE_BASE, DEFAULT_KEP_BASE, KepRef, issue_link, kep_link
from kepctl.layout import PROPOSED_STAGE, require_release, stage_path
from kepctl.records import ReleaseContent, record_filename, write_record
from kepctl.versions import parse_version


def _require_text(value: str, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required to propose a KEP for a release")
    return text


def _require_identifier(identifier: str) -> str:
    text = _require_text(identifier, "KEP identifier")
    if "/" in text or "\\" in text or text in {".", ".."} or text.startswith("."):
        raise ValidationError(f"invalid KEP identifier {identifier!r}: must be a plain file name")
    return text


def propose_kep(
    repo_root: Path,
    release: str,
    identifier: str,
    sig: str,
    stage: str,
    issue: str,
    link: str,
    *,
    target: str = PROPOSED_STAGE,
    echo_fn: Callable[[str], None] = typer.echo,
) -> Path:
    """Write ``<release>/<target>/<identifier>.yaml``, replacing any prior record."""
    release = parse_version(_require_text(release, "target release")).original
    identifier = _require_identifier(identifier)
    record = ReleaseContent(
        sig=_require_text(sig, "SIG"),
        stage=_require_text(stage, "stage"),
        issue=issue or "",
        link=link or "",
    )
    target_dir = stage_path(repo_root, release, target)
    require_release(repo_root, release)
    if not target_dir.is_dir():
        raise PreconditionError(
            f"unable to propose KEP for release {release}: {target} directory does not exist: {target_dir}"
        )
    path = target_dir / record_filename(identifier)
    write_record(path, record)
    echo_fn(f"Generated release proposal for {identifier} at {path}")
    return path


def propose_kep_ref(
    repo_root: Path,
    release: str,
    ref: KepRef,
    stage: str,
    *,
    kep_base: str = DEFAULT_KEP_BASE,
    issue_base: str = DEFAULT_ISSUE_BASE,
    target: str = PROPOSED_STAGE,
    echo_fn: Callable[[str], None] = typer.echo,
) -> Path:
    return propose_kep(
        repo_root,
        release,
        ref.identifier,
        ref.sig,
        stage,
        issue_link(ref, base=issue_base),
        kep_link(ref, base=kep_base),
        target=target,
        echo_fn=echo_fn,
    )
