from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_JSON_INDENT = 2
DEFAULT_COERCE_IDS = True
DEFAULT_COERCE_SCALARS = True

SCALAR_KINDS = {"any", "string", "text", "integer", "number", "boolean", "datetime"}


class AssociationKind(str, Enum):
    HAS_MANY = "hasMany"
    BELONGS_TO = "belongsTo"


@dataclass(frozen=True)
class AssociationDescriptor:
    kind: AssociationKind
    target_type: str
    relation_name: str
    through: Optional[str] = None

    @property
    def is_has_many(self) -> bool:
        return self.kind is AssociationKind.HAS_MANY

    @property
    def is_belongs_to(self) -> bool:
        return self.kind is AssociationKind.BELONGS_TO


@dataclass
class TypeDescription:
    """Scalar properties and associations declared for one record type."""

    name: str
    properties: Dict[str, str] = field(default_factory=dict)
    associations: Tuple[AssociationDescriptor, ...] = ()

    @property
    def has_many(self) -> Tuple[AssociationDescriptor, ...]:
        return tuple(a for a in self.associations if a.is_has_many)

    @property
    def belongs_to(self) -> Tuple[AssociationDescriptor, ...]:
        return tuple(a for a in self.associations if a.is_belongs_to)
