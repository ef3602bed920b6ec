"""KEP references of the form ``<sig>/<number>-<name>`` and their links."""

from __future__ import annotations

from dataclasses import dataclass
import re

from kepctl.exceptions import ValidationError

DEFAULT_KEP_BASE = "https://github.com/kubernetes/enhancements/tree/master/keps"
DEFAULT_ISSUE_BASE = "https://github.com/kubernetes/enhancements/issues"

_NAME_RE = re.compile(r"^(?P<number>\d+)-[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True)
class KepRef:
    sig: str
    number: str
    name: str

    @property
    def identifier(self) -> str:
        return self.name

    @property
    def path(self) -> str:
        return f"{self.sig}/{self.name}"


def parse_kep_ref(text: str) -> KepRef:
    candidate = (text or "").strip().strip("/")
    if not candidate:
        raise ValidationError("KEP is required - ex: sig-architecture/000-mykep")
    parts = candidate.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValidationError(
            f"invalid KEP {text!r}: expected <sig>/<number>-<name>, ex: sig-architecture/000-mykep"
        )
    sig, name = parts
    match = _NAME_RE.match(name)
    if match is None:
        raise ValidationError(
            f"invalid KEP name {name!r}: expected <number>-<name>, ex: 000-mykep"
        )
    return KepRef(sig=sig, number=match.group("number"), name=name)


def kep_link(ref: KepRef, *, base: str = DEFAULT_KEP_BASE) -> str:
    return f"{base.rstrip('/')}/{ref.path}"


def issue_link(ref: KepRef, *, base: str = DEFAULT_ISSUE_BASE) -> str:
    return f"{base.rstrip('/')}/{ref.number}"
