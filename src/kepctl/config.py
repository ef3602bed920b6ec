from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from kepctl.exceptions import ValidationError
from kepctl.kep_ref import DEFAULT_ISSUE_BASE, DEFAULT_KEP_BASE

DEFAULT_CONFIG_NAME = "kepctl.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class KepctlConfig:
    repo_path: Path | None = None
    enhancement_team: tuple[str, ...] = ()
    release_leads: tuple[str, ...] = ()
    kep_base: str = DEFAULT_KEP_BASE
    issue_base: str = DEFAULT_ISSUE_BASE


def _load_toml(path: Path, *, required: bool = False) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        if required:
            raise ValidationError(f"unable to read config file {path}: {exc}") from exc
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        if required:
            raise ValidationError(f"invalid config file {path}: {exc}") from exc
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    """Load kepctl.toml. An explicit config_path must exist and parse."""
    if config_path is not None:
        return _load_toml(config_path, required=True)
    base = root if root is not None else Path.cwd()
    return _load_toml(base / DEFAULT_CONFIG_NAME)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_text(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def parse_config(data: TomlTable) -> KepctlConfig:
    release = _section(data, "release")
    links = _section(data, "links")
    repo_path = data.get("repo_path")
    return KepctlConfig(
        repo_path=Path(repo_path) if isinstance(repo_path, str) and repo_path.strip() else None,
        enhancement_team=tuple(normalize_name_list(release.get("enhancement_team"))),
        release_leads=tuple(normalize_name_list(release.get("release_leads"))),
        kep_base=_as_text(links.get("kep_base"), DEFAULT_KEP_BASE),
        issue_base=_as_text(links.get("issue_base"), DEFAULT_ISSUE_BASE),
    )


def resolve_config(root: Path | None = None, config_path: Path | None = None) -> KepctlConfig:
    return parse_config(load_config(root=root, config_path=config_path))
