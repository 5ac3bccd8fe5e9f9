"""Configuration for extraction and inlining, loaded from JSON.

Example ``regionkit.json``::

    {
      "default_language": "python",
      "tab_width": 4,
      "parser_overrides": {".csx": "directive", ".pyw": "python"},
      "encoding": "utf-8"
    }

Every key is optional; missing keys take the dataclass defaults.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson

from regionkit.errors import ConfigError
from regionkit.templates import TEMPLATES
from regionkit.trivia import PARSER_KINDS


@dataclass(frozen=True, slots=True)
class RegionKitConfig:
    default_language: str = "csharp"   # Template used when synthesizing a program
    tab_width: int = 4
    parser_overrides: dict[str, str] = field(default_factory=dict[str, str])
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.default_language not in TEMPLATES:
            raise ConfigError(f"Unknown default_language: {self.default_language!r}")
        if self.tab_width < 1:
            raise ConfigError(f"tab_width must be >= 1, got {self.tab_width}")
        for ext, kind in self.parser_overrides.items():
            if not ext.startswith("."):
                raise ConfigError(f"parser_overrides key must be an extension: {ext!r}")
            if kind not in PARSER_KINDS:
                raise ConfigError(f"Unknown parser kind for {ext!r}: {kind!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegionKitConfig:
        unknown = set(data) - {"default_language", "tab_width", "parser_overrides", "encoding"}
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(sorted(unknown))}")
        overrides = data.get("parser_overrides", {})
        return cls(
            default_language=data.get("default_language", "csharp"),
            tab_width=int(data.get("tab_width", 4)),
            parser_overrides={str(k).lower(): str(v) for k, v in overrides.items()},
            encoding=data.get("encoding", "utf-8"),
        )

    @classmethod
    def from_json(cls, path: Path) -> RegionKitConfig:
        """Load from a regionkit JSON config file."""
        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a JSON object: {path}")
        return cls.from_dict(data)
