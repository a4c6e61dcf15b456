"""Derive a schema registry from SQLAlchemy table metadata."""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, List

from sqlalchemy import (Boolean, Date, DateTime, Float, ForeignKey, Integer,
                        MetaData, Numeric, String, Table, Text)
from sqlalchemy.types import TypeEngine

from .models import AssociationDescriptor, AssociationKind, TypeDescription
from .naming import classify
from .schema import SchemaRegistry


def column_kind(column_type: TypeEngine) -> str:
    if isinstance(column_type, Boolean):
        return "boolean"
    if isinstance(column_type, Integer):
        return "integer"
    if isinstance(column_type, (Numeric, Float)):
        return "number"
    if isinstance(column_type, (DateTime, Date)):
        return "datetime"
    if isinstance(column_type, (String, Text)):
        return "string"
    return "any"


def relation_name_for(column_name: str) -> str:
    if column_name.endswith("_id") and len(column_name) > 3:
        return column_name[:-3]
    return column_name


def foreign_keys(table: Table) -> List[ForeignKey]:
    """Foreign keys of ``table`` in column order."""
    return [
        fk
        for column in table.columns
        for fk in sorted(column.foreign_keys, key=lambda fk: fk.target_fullname)
    ]


def is_join_table(table: Table) -> bool:
    """A pure join table: two foreign keys to distinct tables and no payload columns."""
    fks = foreign_keys(table)
    if len(fks) != 2 or fks[0].column.table is fks[1].column.table:
        return False
    fk_columns = {fk.parent.name for fk in fks}
    payload = [c for c in table.columns if not c.primary_key and c.name not in fk_columns]
    return not payload


class MetadataSchemaBuilder:
    def __init__(self, metadata: MetaData) -> None:
        self.metadata = metadata
        self._type_names: Dict[str, str] = {}
        self._properties: Dict[str, Dict[str, str]] = OrderedDict()
        self._associations: Dict[str, List[AssociationDescriptor]] = OrderedDict()

    def build(self) -> SchemaRegistry:
        tables = list(self.metadata.tables.values())
        entity_tables = [t for t in tables if not is_join_table(t)]

        for table in entity_tables:
            type_name = classify(table.name)
            self._type_names[table.name] = type_name
            self._associations[type_name] = []
            fk_columns = {fk.parent.name for fk in foreign_keys(table)}
            self._properties[type_name] = {
                column.name: column_kind(column.type)
                for column in table.columns
                if not column.primary_key and column.name not in fk_columns
            }

        for table in entity_tables:
            self._add_foreign_keys(table)
        for table in tables:
            if is_join_table(table):
                self._add_join_table(table)

        return SchemaRegistry(
            TypeDescription(
                name=type_name,
                properties=self._properties[type_name],
                associations=tuple(self._associations[type_name]),
            )
            for type_name in self._properties
        )

    def _add(self, type_name: str, descriptor: AssociationDescriptor) -> None:
        self._associations[type_name].append(descriptor)

    def _add_foreign_keys(self, table: Table) -> None:
        child = self._type_names[table.name]
        fks = foreign_keys(table)
        targets = [fk.column.table.name for fk in fks]
        for fk in fks:
            parent_table = fk.column.table.name
            parent = self._type_names.get(parent_table)
            if parent is None:
                continue
            relation = relation_name_for(fk.parent.name)
            self._add(
                child,
                AssociationDescriptor(AssociationKind.BELONGS_TO, parent, relation),
            )
            inverse_name = table.name
            if targets.count(parent_table) > 1:
                inverse_name = f"{relation}_{table.name}"
            self._add(
                parent,
                AssociationDescriptor(AssociationKind.HAS_MANY, child, inverse_name),
            )

    def _add_join_table(self, table: Table) -> None:
        left, right = (fk.column.table.name for fk in foreign_keys(table))
        left_type = self._type_names.get(left)
        right_type = self._type_names.get(right)
        if left_type is None or right_type is None:
            return
        self._add(
            left_type,
            AssociationDescriptor(AssociationKind.HAS_MANY, right_type, right, table.name),
        )
        self._add(
            right_type,
            AssociationDescriptor(AssociationKind.HAS_MANY, left_type, left, table.name),
        )


def registry_from_metadata(metadata: MetaData) -> SchemaRegistry:
    registry = MetadataSchemaBuilder(metadata).build()
    registry.validate()
    return registry
