"""Builds the side-loaded output document from a resolved store."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .naming import NamingService
from .store import NormalizedStore, Record

Document = Dict[str, List[Record]]


def unique(values: List[Any]) -> List[Any]:
    """Drop repeated ids, keeping the first occurrence of each."""
    seen = set()
    result: List[Any] = []
    for value in values:
        try:
            marker = (type(value), value)
            if marker in seen:
                continue
            seen.add(marker)
        except TypeError:
            if value in result:
                continue
        result.append(value)
    return result


def _copy(record: Record) -> Record:
    return {
        key: list(value) if isinstance(value, list) else value
        for key, value in record.items()
    }


def arrayize(store: NormalizedStore, naming: NamingService) -> Document:
    document: Document = {}
    for type_name, bucket in store.items():
        records = document.setdefault(naming.output_key(type_name), [])
        records.extend(_copy(record) for record in bucket.values())
    return document


def unique_ids(document: Document) -> Document:
    for records in document.values():
        for record in records:
            for key, value in record.items():
                if isinstance(value, list):
                    record[key] = unique(value)
    return document


def assemble(store: NormalizedStore, naming: Optional[NamingService] = None) -> Document:
    """Group records by pluralized camel-case type key with de-duplicated arrays.

    Records are copied; the store itself is left untouched.
    """
    return unique_ids(arrayize(store, naming or NamingService()))
