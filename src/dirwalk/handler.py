"""Init record describing a packaged function handler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class HandlerInit:
    """
    Metadata sent when initializing a function handler: its `name`, whether the
    code is shipped as a `binary` archive, and the `main` entry point.
    """

    name: str = ""
    binary: bool = False
    main: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HandlerInit:
        """
        Build from an init payload. Unknown keys are ignored.

        `binary` may be a JSON bool or the strings `"true"` / `"false"`; anything
        else raises `ValueError`.
        """
        return cls(
            name=str(data.get("name", "")),
            binary=_parse_bool(data.get("binary", False)),
            main=str(data.get("main", "")),
        )

    @classmethod
    def for_archive(cls, archive: str | Path, main: str) -> HandlerInit:
        return cls(name=Path(archive).stem, binary=True, main=main)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "binary": self.binary, "main": self.main}


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"Expected a boolean for 'binary', got {value!r}")
