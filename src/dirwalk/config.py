"""
TOML-based config file loading for dirwalk.

Searches for `.dirwalk.toml`, `dirwalk.toml`, or `pyproject.toml [tool.dirwalk]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class DirwalkConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge can tell "not configured" from "explicitly set to the default".
    """

    # Listing
    relative: bool | None = None
    # Packaging
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    compression: str | None = None
    main: str | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".dirwalk.toml", "dirwalk.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(DirwalkConfig)}
_LIST_FIELDS = {"exclude", "extend_exclude"}
_BOOL_FIELDS = {"relative"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.dirwalk.toml` >
    `dirwalk.toml` > `pyproject.toml` (only if it has `[tool.dirwalk]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_dirwalk_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_dirwalk_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "dirwalk" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> DirwalkConfig:
    """
    Load a `DirwalkConfig` from a TOML file, either a standalone `dirwalk.toml` /
    `.dirwalk.toml` or the `[tool.dirwalk]` table of a `pyproject.toml`.

    Raises `ValueError` naming the file for malformed TOML or mistyped values.
    """
    try:
        data = tomllib.loads(config_path.read_text())
        if config_path.name == "pyproject.toml":
            data = data.get("tool", {}).get("dirwalk", {})
        return _parse_config_data(data)
    except ValueError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e


def _coerce(key: str, field_name: str, value: Any) -> Any:
    """Check a TOML value against the field's type. A bare string is accepted as a one-item list."""
    if field_name in _LIST_FIELDS:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value)):
            return cast(list[str], value)
        raise ValueError(f"'{key}' must be a string or a list of strings, not {value!r}")
    if field_name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        raise ValueError(f"'{key}' must be true or false, not {value!r}")
    if isinstance(value, str):
        return value
    raise ValueError(f"'{key}' must be a string, not {value!r}")


def _parse_config_data(data: dict[str, Any]) -> DirwalkConfig:
    """Parse a flat or sectioned TOML dict into DirwalkConfig. Unknown keys are ignored."""
    # Flatten sections: [listing] and [packaging] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        field_name = key.replace("-", "_")
        if field_name in _VALID_FIELDS:
            mapped[field_name] = _coerce(key, field_name, value)

    return DirwalkConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: DirwalkConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(DirwalkConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
