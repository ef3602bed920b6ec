from __future__ import annotations

from pathlib import Path

import pytest

from kepctl.exceptions import (
    InvalidVersionError,
    PreconditionError,
    ReleaseNotFoundError,
    ValidationError,
)
from kepctl.kep_ref import parse_kep_ref
from kepctl.placement import propose_kep, propose_kep_ref
from kepctl.records import ReleaseContent, read_record, record_identifier

ISSUE = "https://github.com/kubernetes/enhancements/issues/123"
LINK = "https://github.com/kubernetes/enhancements/tree/master/keps/sig-api/123-foo"


def test_propose_kep_writes_record_into_proposed(
    repo_root: Path, release_root: Path, echo_fn, echo_lines: list[str]
) -> None:
    path = propose_kep(
        repo_root, "v1.21", "123-foo", "sig-api", "beta", ISSUE, LINK, echo_fn=echo_fn
    )
    assert path == release_root / "proposed" / "123-foo.yaml"
    assert record_identifier(path.name) == "123-foo"
    assert read_record(path) == ReleaseContent(sig="sig-api", stage="beta", issue=ISSUE, link=LINK)
    assert echo_lines == [f"Generated release proposal for 123-foo at {path}"]


def test_propose_kep_overwrites_previous_record(
    repo_root: Path, release_root: Path, echo_fn
) -> None:
    propose_kep(repo_root, "v1.21", "123-foo", "sig-api", "alpha", ISSUE, LINK, echo_fn=echo_fn)
    path = propose_kep(repo_root, "v1.21", "123-foo", "sig-node", "stable", "", "", echo_fn=echo_fn)
    assert read_record(path) == ReleaseContent(sig="sig-node", stage="stable")
    text = path.read_text(encoding="utf-8")
    assert "sig-api" not in text
    assert "alpha" not in text


def test_propose_kep_into_other_stage(repo_root: Path, release_root: Path, echo_fn) -> None:
    path = propose_kep(
        repo_root, "v1.21", "123-foo", "sig-api", "beta", ISSUE, LINK,
        target="accepted", echo_fn=echo_fn,
    )
    assert path.parent == release_root / "accepted"


def test_propose_kep_requires_existing_release(repo_root: Path, echo_fn) -> None:
    with pytest.raises(ReleaseNotFoundError):
        propose_kep(repo_root, "v1.21", "123-foo", "sig-api", "beta", ISSUE, LINK, echo_fn=echo_fn)
    assert not (repo_root / "releases").exists()


def test_propose_kep_requires_stage_directory(repo_root: Path, echo_fn) -> None:
    (repo_root / "releases" / "v1.21").mkdir(parents=True)
    with pytest.raises(PreconditionError, match="proposed directory does not exist"):
        propose_kep(repo_root, "v1.21", "123-foo", "sig-api", "beta", ISSUE, LINK, echo_fn=echo_fn)


@pytest.mark.parametrize(
    ("identifier", "sig", "stage"),
    [
        ("", "sig-api", "beta"),
        ("123-foo", "", "beta"),
        ("123-foo", "sig-api", " "),
        ("sig-api/123-foo", "sig-api", "beta"),
        ("..", "sig-api", "beta"),
    ],
)
def test_propose_kep_validation(
    repo_root: Path, release_root: Path, echo_fn, identifier: str, sig: str, stage: str
) -> None:
    with pytest.raises(ValidationError):
        propose_kep(repo_root, "v1.21", identifier, sig, stage, ISSUE, LINK, echo_fn=echo_fn)
    assert list((release_root / "proposed").iterdir()) == []


def test_propose_kep_rejects_unknown_target(repo_root: Path, release_root: Path, echo_fn) -> None:
    with pytest.raises(ValidationError):
        propose_kep(
            repo_root, "v1.21", "123-foo", "sig-api", "beta", ISSUE, LINK,
            target="graduated", echo_fn=echo_fn,
        )


def test_propose_kep_ref_derives_links(repo_root: Path, release_root: Path, echo_fn) -> None:
    path = propose_kep_ref(
        repo_root, "v1.21", parse_kep_ref("sig-api/123-foo"), "proposed", echo_fn=echo_fn
    )
    assert path == release_root / "proposed" / "123-foo.yaml"
    assert read_record(path) == ReleaseContent(
        sig="sig-api", stage="proposed", issue=ISSUE, link=LINK
    )


def test_propose_kep_ref_custom_link_bases(repo_root: Path, release_root: Path, echo_fn) -> None:
    path = propose_kep_ref(
        repo_root,
        "v1.21",
        parse_kep_ref("sig-api/123-foo"),
        "beta",
        kep_base="https://example.test/keps/",
        issue_base="https://example.test/issues",
        echo_fn=echo_fn,
    )
    record = read_record(path)
    assert record.link == "https://example.test/keps/sig-api/123-foo"
    assert record.issue == "https://example.test/issues/123"


@pytest.mark.parametrize("release", ["banana", "..", "v1.21/../.."])
def test_propose_kep_rejects_malformed_release(repo_root: Path, echo_fn, release: str) -> None:
    (repo_root / "releases" / "banana" / "proposed").mkdir(parents=True)
    (repo_root / "proposed").mkdir()
    with pytest.raises(InvalidVersionError):
        propose_kep(repo_root, release, "123-foo", "sig-api", "beta", ISSUE, LINK, echo_fn=echo_fn)
    assert list((repo_root / "releases" / "banana" / "proposed").iterdir()) == []
    assert list((repo_root / "proposed").iterdir()) == []
