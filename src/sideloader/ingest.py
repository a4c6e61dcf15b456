"""Folds nested records into the normalized store."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Set, Tuple

from pydantic import BaseModel

from .convert import convert_scalar, normalize_id
from .errors import InvalidInput, MissingIdentity, SchemaMismatch
from .models import AssociationDescriptor, TypeDescription
from .naming import NamingService
from .schema import SchemaRegistry
from .store import NormalizedStore, Record

LOGGER = logging.getLogger("sideloader.ingest")

Identity = Tuple[str, Any]
SCALAR_VALUE_TYPES = (str, bytes, int, float, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def is_record(value: Any) -> bool:
    if value is None or isinstance(value, SCALAR_VALUE_TYPES) or is_sequence(value):
        return False
    return isinstance(value, (Mapping, BaseModel)) or hasattr(value, "__dict__")


def snapshot(record: Any) -> Mapping[str, Any]:
    """Return the attribute snapshot of a mapping, pydantic model or plain object."""
    if isinstance(record, Mapping):
        return record
    if isinstance(record, BaseModel):
        return record.model_dump()
    to_dict = getattr(record, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if hasattr(record, "__dict__"):
        return vars(record)
    raise InvalidInput(f"Cannot read attributes from {type(record).__name__}")


class MergeEngine:
    """Ingest records into a :class:`NormalizedStore` following the registry."""

    def __init__(
        self,
        store: NormalizedStore,
        registry: SchemaRegistry,
        naming: Optional[NamingService] = None,
        coerce_ids: bool = True,
        coerce_scalars: bool = True,
    ) -> None:
        self.store = store
        self.registry = registry
        self.naming = naming or NamingService()
        self.coerce_ids = coerce_ids
        self.coerce_scalars = coerce_scalars

    def ingest(self, payload: Any) -> List[Any]:
        """Ingest one record or a sequence of records; return the top-level ids."""
        if payload is None:
            raise InvalidInput("ingest() requires a record or a sequence of records")

        items = list(payload) if is_sequence(payload) else [payload]
        prepared = []
        for item in items:
            if not is_record(item):
                raise InvalidInput(f"Expected a record, got {type(item).__name__}")
            prepared.append(self._identify(item))

        return [
            self._ingest_object(snap, type_name, record_id, set())
            for snap, type_name, record_id in prepared
        ]

    def _identify(
        self, record: Any, default_type: Optional[str] = None
    ) -> Tuple[Mapping[str, Any], str, Any]:
        snap = snapshot(record)
        type_name = snap.get("type") or getattr(record, "type", None)
        if not type_name and not isinstance(record, Mapping):
            class_name = type(record).__name__
            if class_name in self.registry:
                type_name = class_name
        type_name = type_name or default_type
        if not isinstance(type_name, str) or not type_name:
            raise MissingIdentity(f"Record has no type tag: {dict(snap)!r}")
        if default_type is not None and type_name != default_type:
            raise SchemaMismatch(
                f"Nested record of type {type_name!r} where {default_type!r} was expected"
            )

        record_id = normalize_id(snap.get("id"), self.coerce_ids)
        if record_id is None or record_id == "":
            raise MissingIdentity(f"{type_name} record has no id: {dict(snap)!r}")
        return snap, type_name, record_id

    def _new_record(self, description: TypeDescription, record_id: Any) -> Record:
        record: Record = {"id": record_id, "type": description.name}
        for prop in description.properties:
            record.setdefault(prop, None)
        for assoc in description.associations:
            if assoc.is_has_many:
                record[self.naming.has_many_field(assoc.relation_name)] = []
            else:
                record[self.naming.foreign_key_field(assoc.relation_name)] = None
        return record

    def _slot(self, type_name: str, record_id: Any) -> Record:
        description = self.registry.describe(type_name)
        record = self.store.get(type_name, record_id)
        if record is None:
            record = self.store.put(
                type_name, record_id, self._new_record(description, record_id)
            )
        return record

    def _ingest_object(
        self,
        snap: Mapping[str, Any],
        type_name: str,
        record_id: Any,
        expanding: Set[Identity],
    ) -> Any:
        description = self.registry.describe(type_name)
        record = self._slot(type_name, record_id)
        self._merge_scalars(record, description, snap)

        # Only identities on the current expansion path are skipped.
        identity = (type_name, record_id)
        if identity in expanding:
            LOGGER.debug("%s %s is being expanded; scalars updated only", type_name, record_id)
            return record_id
        expanding.add(identity)
        try:
            for assoc in description.associations:
                if assoc.is_has_many:
                    self._merge_has_many(record, assoc, snap, expanding)
                else:
                    self._merge_belongs_to(record, assoc, snap, expanding)
        finally:
            expanding.discard(identity)
        return record_id

    def _merge_scalars(
        self, record: Record, description: TypeDescription, snap: Mapping[str, Any]
    ) -> None:
        for prop, kind in description.properties.items():
            if prop in ("id", "type") or prop not in snap:
                continue
            value = snap[prop]
            record[prop] = convert_scalar(kind, value) if self.coerce_scalars else value

    def _merge_has_many(
        self,
        record: Record,
        assoc: AssociationDescriptor,
        snap: Mapping[str, Any],
        expanding: Set[Identity],
    ) -> None:
        field = self.naming.has_many_field(assoc.relation_name)
        value = snap.get(field) if field in snap else snap.get(assoc.relation_name)
        if value is None:
            return
        if not is_sequence(value):
            raise SchemaMismatch(
                f"{record['type']}.{field} must be a list, got {type(value).__name__}"
            )

        for item in value:
            if item is None:
                continue
            if is_record(item):
                child_snap, child_type, child_id = self._identify(item, assoc.target_type)
                self._ingest_object(child_snap, child_type, child_id, expanding)
            else:
                child_id = normalize_id(item, self.coerce_ids)
                self._ensure_stub(assoc.target_type, child_id)
            # Duplicates are removed at assembly time.
            record[field].append(child_id)

    def _merge_belongs_to(
        self,
        record: Record,
        assoc: AssociationDescriptor,
        snap: Mapping[str, Any],
        expanding: Set[Identity],
    ) -> None:
        fk_field = self.naming.foreign_key_field(assoc.relation_name)
        nested = snap.get(assoc.relation_name)
        if is_record(nested):
            child_snap, child_type, child_id = self._identify(nested, assoc.target_type)
            self._ingest_object(child_snap, child_type, child_id, expanding)
            record[fk_field] = child_id
        elif nested is not None and not is_sequence(nested):
            record[fk_field] = normalize_id(nested, self.coerce_ids)
        elif fk_field in snap:
            record[fk_field] = normalize_id(snap[fk_field], self.coerce_ids)

    def _ensure_stub(self, type_name: str, record_id: Any) -> None:
        if not self.store.has(type_name, record_id):
            LOGGER.debug("Creating reference stub for %s %s", type_name, record_id)
            self._slot(type_name, record_id)
