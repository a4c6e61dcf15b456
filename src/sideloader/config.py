"""Configuration loading for the sideloader CLI and serializer sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .models import (DEFAULT_COERCE_IDS, DEFAULT_COERCE_SCALARS,
                     DEFAULT_JSON_INDENT, DEFAULT_LOG_LEVEL)


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    schema_path: Optional[Path] = None
    coerce_ids: bool = DEFAULT_COERCE_IDS
    coerce_scalars: bool = DEFAULT_COERCE_SCALARS
    json_indent: int = DEFAULT_JSON_INDENT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        schema = os.getenv("SIDELOADER_SCHEMA") or None
        return cls(
            schema_path=Path(schema) if schema else None,
            # Digit-only string ids are folded to ints so "2" and 2 name the same record.
            coerce_ids=_bool(os.getenv("SIDELOADER_COERCE_IDS"), DEFAULT_COERCE_IDS),
            coerce_scalars=_bool(
                os.getenv("SIDELOADER_COERCE_SCALARS"), DEFAULT_COERCE_SCALARS
            ),
            json_indent=max(0, _int(os.getenv("SIDELOADER_INDENT"), DEFAULT_JSON_INDENT)),
            log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
