"""Schema registry: record types, their scalar properties and associations."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SchemaMismatch
from .models import (SCALAR_KINDS, AssociationDescriptor, AssociationKind,
                     TypeDescription)

LOGGER = logging.getLogger("sideloader.schema")


class PropertyDefinition(BaseModel):
    type: str = "any"

    model_config = ConfigDict(extra="allow")

    @field_validator("type")
    @classmethod
    def _known_kind(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in SCALAR_KINDS:
            raise ValueError(f"unknown property type {value!r}")
        return lowered


class AssociationDefinition(BaseModel):
    model: str
    through: Optional[str] = None


class AssociationsDefinition(BaseModel):
    hasMany: Dict[str, AssociationDefinition] = Field(default_factory=dict)
    belongsTo: Dict[str, AssociationDefinition] = Field(default_factory=dict)

    @field_validator("hasMany", "belongsTo", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                name: {"model": entry} if isinstance(entry, str) else entry
                for name, entry in value.items()
            }
        return value


class TypeDefinition(BaseModel):
    properties: Dict[str, PropertyDefinition] = Field(default_factory=dict)
    associations: AssociationsDefinition = Field(default_factory=AssociationsDefinition)

    @field_validator("associations", mode="before")
    @classmethod
    def _empty_associations(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("properties", mode="before")
    @classmethod
    def _expand_properties(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, list):
            return {name: {"type": "any"} for name in value}
        if isinstance(value, dict):
            return {
                name: {"type": entry} if isinstance(entry, str) else (entry or {})
                for name, entry in value.items()
            }
        return value


class SchemaDocument(BaseModel):
    types: Dict[str, TypeDefinition]

    @field_validator("types", mode="before")
    @classmethod
    def _empty_types(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {name: entry or {} for name, entry in value.items()}
        return value


def _descriptors(name: str, definition: TypeDefinition) -> TypeDescription:
    associations: List[AssociationDescriptor] = []
    for relation_name, assoc in definition.associations.hasMany.items():
        associations.append(
            AssociationDescriptor(
                kind=AssociationKind.HAS_MANY,
                target_type=assoc.model,
                relation_name=relation_name,
                through=assoc.through,
            )
        )
    for relation_name, assoc in definition.associations.belongsTo.items():
        associations.append(
            AssociationDescriptor(
                kind=AssociationKind.BELONGS_TO,
                target_type=assoc.model,
                relation_name=relation_name,
                through=assoc.through,
            )
        )
    return TypeDescription(
        name=name,
        properties={prop: entry.type for prop, entry in definition.properties.items()},
        associations=tuple(associations),
    )


class SchemaRegistry:
    """Read-only lookup of type descriptions, in declaration order."""

    def __init__(self, descriptions: Iterable[TypeDescription] = ()) -> None:
        self._types: Dict[str, TypeDescription] = {}
        for description in descriptions:
            self._types[description.name] = description

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SchemaRegistry":
        try:
            document = SchemaDocument.model_validate(payload)
        except ValidationError as exc:
            raise SchemaMismatch(f"Invalid schema document: {exc}") from exc
        registry = cls(_descriptors(name, d) for name, d in document.types.items())
        registry.validate()
        return registry

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def describe(self, type_name: str) -> TypeDescription:
        try:
            return self._types[type_name]
        except KeyError:
            raise SchemaMismatch(f"Type {type_name!r} is not registered") from None

    def validate(self) -> None:
        for description in self._types.values():
            for assoc in description.associations:
                if assoc.target_type not in self._types:
                    raise SchemaMismatch(
                        f"{description.name}.{assoc.relation_name} targets "
                        f"unregistered type {assoc.target_type!r}"
                    )

    def inverse_has_many(
        self, association: AssociationDescriptor, owner_type: str
    ) -> Optional[AssociationDescriptor]:
        """Has-many on the target type pointing back at ``owner_type`` with the same ``through``.

        Returns ``None`` unless exactly one such association is declared.
        """
        target = self.describe(association.target_type)
        candidates = [
            candidate
            for candidate in target.has_many
            if candidate.target_type == owner_type
            and candidate.through == association.through
        ]
        return candidates[0] if len(candidates) == 1 else None

    def inverse_belongs_to(
        self, association: AssociationDescriptor, owner_type: str
    ) -> Optional[AssociationDescriptor]:
        target = self.describe(association.target_type)
        candidates = [
            candidate
            for candidate in target.belongs_to
            if candidate.target_type == owner_type
        ]
        return candidates[0] if len(candidates) == 1 else None


def load_registry(path: Union[str, Path]) -> SchemaRegistry:
    """Load a schema document from a YAML or JSON file."""
    schema_path = Path(path)
    text = schema_path.read_text(encoding="utf-8")
    if schema_path.suffix.lower() == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    if not isinstance(payload, Mapping):
        raise SchemaMismatch(f"Schema document {schema_path} must be a mapping")
    registry = SchemaRegistry.from_dict(payload)
    LOGGER.debug("Loaded %s types from %s", len(registry), schema_path)
    return registry
