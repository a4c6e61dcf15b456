"""Inverse relationship resolution over a fully ingested store.

Every association declared on a type present in the store is visited in
registry order.  Belongs-to links are pushed into the parent's has-many
array, has-many arrays are filled from children carrying a matching foreign
key, and ``through`` associations get one bidirectional mirroring pass.
Associations without a declared inverse are left as ingested.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from .models import AssociationDescriptor
from .naming import NamingService
from .schema import SchemaRegistry
from .store import NormalizedStore, Record

LOGGER = logging.getLogger("sideloader.resolver")


def _append_unique(values: List[Any], value: Any) -> bool:
    if value in values:
        return False
    values.append(value)
    return True


class RelationshipResolver:
    def __init__(
        self, registry: SchemaRegistry, naming: Optional[NamingService] = None
    ) -> None:
        self.registry = registry
        self.naming = naming or NamingService()

    def resolve(self, store: NormalizedStore) -> int:
        """Populate inverse relationship fields in place; return the number of links added."""
        added = 0
        present = set(store.types())
        for type_name in self.registry:
            if type_name not in present:
                continue
            description = self.registry.describe(type_name)
            for assoc in description.associations:
                if assoc.target_type not in present:
                    continue
                if assoc.is_belongs_to:
                    added += self._resolve_belongs_to(store, type_name, assoc)
                else:
                    added += self._resolve_has_many(store, type_name, assoc)
                    if assoc.through is not None:
                        added += self._mirror_through(store, type_name, assoc)
        LOGGER.debug("Resolution added %s links", added)
        return added

    def _array(self, record: Record, field: str) -> List[Any]:
        values = record.get(field)
        if not isinstance(values, list):
            values = record[field] = []
        return values

    def _resolve_belongs_to(
        self, store: NormalizedStore, type_name: str, assoc: AssociationDescriptor
    ) -> int:
        inverse = self.registry.inverse_has_many(assoc, type_name)
        if inverse is None:
            LOGGER.debug(
                "No has-many inverse for %s.%s on %s",
                type_name,
                assoc.relation_name,
                assoc.target_type,
            )
            return 0

        fk_field = self.naming.foreign_key_field(assoc.relation_name)
        inverse_field = self.naming.has_many_field(inverse.relation_name)
        added = 0
        for record in store.records(type_name):
            parent = store.get(assoc.target_type, record.get(fk_field))
            if parent is None:
                continue
            added += _append_unique(self._array(parent, inverse_field), record["id"])
        return added

    def _resolve_has_many(
        self, store: NormalizedStore, type_name: str, assoc: AssociationDescriptor
    ) -> int:
        inverse = self.registry.inverse_belongs_to(assoc, type_name)
        if inverse is None:
            return 0

        field = self.naming.has_many_field(assoc.relation_name)
        inverse_fk = self.naming.foreign_key_field(inverse.relation_name)
        added = 0
        for record in store.records(type_name):
            values = self._array(record, field)
            for candidate in store.records(assoc.target_type):
                if candidate.get(inverse_fk) == record["id"]:
                    added += _append_unique(values, candidate["id"])
            # Children listed here but carrying no foreign key point back at us.
            for child_id in values:
                child = store.get(assoc.target_type, child_id)
                if child is not None and child.get(inverse_fk) is None:
                    child[inverse_fk] = record["id"]
                    added += 1
        return added

    def _mirror_through(
        self, store: NormalizedStore, type_name: str, assoc: AssociationDescriptor
    ) -> int:
        inverse = self.registry.inverse_has_many(assoc, type_name)
        if inverse is None:
            LOGGER.debug(
                "No through inverse for %s.%s (%s)",
                type_name,
                assoc.relation_name,
                assoc.through,
            )
            return 0

        field = self.naming.has_many_field(assoc.relation_name)
        inverse_field = self.naming.has_many_field(inverse.relation_name)
        added = 0
        # Single pass in each direction, not iterated to a fixed point.
        for record in store.records(type_name):
            values = self._array(record, field)
            for other_id in list(values):
                other = store.get(assoc.target_type, other_id)
                if other is not None:
                    added += _append_unique(self._array(other, inverse_field), record["id"])
            for candidate in store.records(assoc.target_type):
                if record["id"] in self._array(candidate, inverse_field):
                    added += _append_unique(values, candidate["id"])
        return added
