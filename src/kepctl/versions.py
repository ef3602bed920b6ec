"""Semantic version validation for release identifiers."""

from __future__ import annotations

from dataclasses import dataclass
import re

from kepctl.exceptions import InvalidVersionError

# Loose form: leading "v", leading zeros and missing minor/patch components
# are accepted.
_SEMVER_RE = re.compile(
    r"^v?(?P<major>\d+)"
    r"(?:\.(?P<minor>\d+))?"
    r"(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class ReleaseVersion:
    original: str
    major: int
    minor: int
    patch: int
    prerelease: str = ""
    build: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


def parse_version(text: str) -> ReleaseVersion:
    candidate = (text or "").strip()
    if not candidate:
        raise InvalidVersionError(text, "must provide a release version")
    match = _SEMVER_RE.match(candidate)
    if match is None:
        raise InvalidVersionError(text)
    return ReleaseVersion(
        original=candidate,
        major=int(match.group("major")),
        minor=int(match.group("minor") or 0),
        patch=int(match.group("patch") or 0),
        prerelease=match.group("prerelease") or "",
        build=match.group("build") or "",
    )

