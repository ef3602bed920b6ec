"""YAML codec for per-stage proposal metadata records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

import yaml

from kepctl.exceptions import RecordDecodeError, ReleaseIOError

RECORD_SUFFIX = ".yaml"

_FIELDS: tuple[str, ...] = ("issue", "link", "sig", "stage")


@dataclass(frozen=True)
class ReleaseContent:
    """One proposal's association with one release stage.

    ``kep`` is the proposal identifier. Per-stage files leave it out and
    recover it from the filename; the manifest carries it inline.
    """

    sig: str = ""
    stage: str = ""
    issue: str = ""
    link: str = ""
    kep: str = ""

    def with_identifier(self, identifier: str) -> "ReleaseContent":
        return replace(self, kep=identifier)

    def to_payload(self) -> dict[str, str]:
        payload = {field: getattr(self, field) for field in _FIELDS}
        if self.kep:
            payload["kep"] = self.kep
        return payload


def record_identifier(filename: str) -> str | None:
    if not filename.endswith(RECORD_SUFFIX):
        return None
    identifier = filename[: -len(RECORD_SUFFIX)]
    return identifier or None


def record_filename(identifier: str) -> str:
    return f"{identifier}{RECORD_SUFFIX}"


def dump_yaml(payload: object, *, sort_keys: bool = True) -> bytes:
    text = yaml.safe_dump(
        payload,
        sort_keys=sort_keys,
        default_flow_style=False,
        allow_unicode=True,
    )
    return text.encode("utf-8")


def encode_record(record: ReleaseContent) -> bytes:
    return dump_yaml(record.to_payload())


def _field_text(payload: Mapping[object, object], field: str, path: Path | None) -> str:
    value = payload.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise RecordDecodeError(
            f"field {field!r} must be a string, got {type(value).__name__}",
            path=path,
        )
    return value


def decode_record(data: bytes | str, *, path: Path | None = None) -> ReleaseContent:
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(f"record is not valid UTF-8: {exc}", path=path) from exc
    try:
        payload = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise RecordDecodeError(f"malformed record: {exc}", path=path) from exc
    if payload is None:
        return ReleaseContent()
    if not isinstance(payload, Mapping):
        raise RecordDecodeError(
            f"record must be a mapping, got {type(payload).__name__}",
            path=path,
        )
    # Unknown keys are ignored.
    return ReleaseContent(
        sig=_field_text(payload, "sig", path),
        stage=_field_text(payload, "stage", path),
        issue=_field_text(payload, "issue", path),
        link=_field_text(payload, "link", path),
        kep=_field_text(payload, "kep", path),
    )


def read_record(path: Path) -> ReleaseContent:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ReleaseIOError(f"unable to read record {path}: {exc}") from exc
    return decode_record(data, path=path)


def write_record(path: Path, record: ReleaseContent) -> None:
    try:
        path.write_bytes(encode_record(record))
    except OSError as exc:
        raise ReleaseIOError(f"unable to write record {path}: {exc}") from exc
