"""Conversion of incoming attribute values to their declared scalar kinds."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from dateutil import parser as dtparse


def dt(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if not isinstance(value, str) or not value:
        return value
    try:
        return dtparse.parse(value).isoformat()
    except (ValueError, OverflowError):
        return value


def convert_scalar(kind: str, value: Any) -> Any:
    """Convert ``value`` to ``kind``; values that do not convert are kept as given."""
    if value is None or kind in ("any", "string", "text"):
        return value

    if kind == "boolean":
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "1", "yes"}:
                return True
            if lowered in {"false", "0", "no"}:
                return False
        return value

    if kind == "integer":
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            return value
        try:
            return int(value)
        except (TypeError, ValueError):
            return value

    if kind == "number":
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        try:
            return float(value)
        except (TypeError, ValueError):
            return value

    if kind == "datetime":
        return dt(value)

    return value


def normalize_id(value: Any, coerce: bool = True) -> Any:
    """Fold digit-only string ids to ints so ``"2"`` and ``2`` name one record."""
    if coerce and isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value
