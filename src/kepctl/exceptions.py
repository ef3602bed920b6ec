"""Error taxonomy for release-state operations."""

from __future__ import annotations

from pathlib import Path


class KepctlError(RuntimeError):
    """Base class for every failure surfaced by kepctl operations."""


class ValidationError(KepctlError):
    """Raised for malformed input before any file-system mutation."""


class InvalidVersionError(ValidationError):
    def __init__(self, value: str, reason: str = "not a semantic version"):
        super().__init__(f"invalid release version {value!r}: {reason}")
        self.value = value


class PreconditionError(KepctlError):
    """Raised when the on-disk state does not allow the operation."""


class RepoNotFoundError(PreconditionError):
    pass


class ReleaseNotFoundError(PreconditionError):
    def __init__(self, release: str, path: Path):
        super().__init__(f"release directory does not exist for {release}: {path}")
        self.release = release
        self.path = path


class ReleaseExistsError(PreconditionError):
    def __init__(self, release: str, existing: list[Path]):
        joined = ", ".join(str(path) for path in existing)
        super().__init__(f"release {release} is already initialized: {joined}")
        self.release = release
        self.existing = tuple(existing)


class ReleaseIOError(KepctlError):
    """Raised when a directory or file cannot be created, read, or written."""


class RecordDecodeError(KepctlError):
    def __init__(self, message: str, *, path: Path | None = None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class ManifestError(KepctlError):
    def __init__(self, message: str, *, release: str, stage: str | None = None):
        super().__init__(message)
        self.release = release
        self.stage = stage


class DuplicateProposalError(ManifestError):
    def __init__(self, release: str, duplicates: dict[str, tuple[str, ...]]):
        details = "; ".join(
            f"{identifier} in {', '.join(stages)}"
            for identifier, stages in sorted(duplicates.items())
        )
        super().__init__(
            f"proposals appear in more than one stage of release {release}: {details}",
            release=release,
        )
        self.duplicates = dict(duplicates)
