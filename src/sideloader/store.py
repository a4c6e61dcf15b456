"""Canonical per-type, per-id record store."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

Record = Dict[str, Any]


class NormalizedStore:
    """Mapping of type name to (mapping of id to record), one record per identity."""

    def __init__(self) -> None:
        self._records: Dict[str, Dict[Any, Record]] = {}

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._records

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._records.values())

    def types(self) -> Tuple[str, ...]:
        return tuple(self._records)

    def records(self, type_name: str) -> Iterator[Record]:
        return iter(tuple(self._records.get(type_name, {}).values()))

    def get(self, type_name: str, record_id: Any) -> Optional[Record]:
        return self._records.get(type_name, {}).get(record_id)

    def has(self, type_name: str, record_id: Any) -> bool:
        return record_id in self._records.get(type_name, {})

    def put(self, type_name: str, record_id: Any, record: Record) -> Record:
        self._records.setdefault(type_name, {})[record_id] = record
        return record

    def items(self) -> Iterator[Tuple[str, Dict[Any, Record]]]:
        return iter(self._records.items())

    def view(self) -> Mapping[str, Mapping[Any, Record]]:
        """Read-only view of the raw store for diagnostics."""
        return MappingProxyType(
            {name: MappingProxyType(bucket) for name, bucket in self._records.items()}
        )
