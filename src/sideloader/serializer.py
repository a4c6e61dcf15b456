"""Serializer session: ingest nested records, then emit a side-loaded document."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from .assembler import Document, assemble
from .config import Settings
from .errors import InvalidInput, SchemaMismatch
from .ingest import MergeEngine
from .naming import NamingService
from .resolver import RelationshipResolver
from .schema import SchemaRegistry
from .store import NormalizedStore, Record

LOGGER = logging.getLogger("sideloader.serializer")


class Serializer:
    """Owns one normalized store bound to one schema registry.

    Calls are not thread safe; use one instance per unit of work.
    """

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        naming: Optional[NamingService] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._naming = naming or NamingService()
        self._settings = settings or Settings()
        self._registry: Optional[SchemaRegistry] = None
        self._store = NormalizedStore()
        self.init(registry)

    def init(self, registry: Optional[SchemaRegistry] = None) -> None:
        """Start a fresh store, optionally rebinding to ``registry``."""
        if registry is not None:
            self._registry = registry
        self._store = NormalizedStore()

    @property
    def registry(self) -> SchemaRegistry:
        if self._registry is None:
            raise SchemaMismatch("No schema registry bound; call init(registry) first")
        return self._registry

    @property
    def store(self) -> Mapping[str, Mapping[Any, Record]]:
        return self._store.view()

    def ingest(self, payload: Any) -> List[Any]:
        if payload is None:
            raise InvalidInput("ingest() requires a record or a sequence of records")
        engine = MergeEngine(
            self._store,
            self.registry,
            naming=self._naming,
            coerce_ids=self._settings.coerce_ids,
            coerce_scalars=self._settings.coerce_scalars,
        )
        return engine.ingest(payload)

    def serialize(self) -> Document:
        RelationshipResolver(self.registry, self._naming).resolve(self._store)
        document = assemble(self._store, self._naming)
        LOGGER.debug(
            "Serialized %s records across %s types", len(self._store), len(document)
        )
        return document
