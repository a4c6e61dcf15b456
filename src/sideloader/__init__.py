"""Flatten nested typed records into a de-duplicated, side-loaded document."""

from .assembler import assemble
from .config import Settings
from .errors import InvalidInput, MissingIdentity, SchemaMismatch, SideloaderError
from .ingest import MergeEngine
from .models import AssociationDescriptor, AssociationKind, TypeDescription
from .naming import NamingService, camelize, pluralize
from .resolver import RelationshipResolver
from .schema import SchemaRegistry, load_registry
from .schema_builder import registry_from_metadata
from .serializer import Serializer
from .store import NormalizedStore

__all__ = [
    "AssociationDescriptor",
    "AssociationKind",
    "InvalidInput",
    "MergeEngine",
    "MissingIdentity",
    "NamingService",
    "NormalizedStore",
    "RelationshipResolver",
    "SchemaMismatch",
    "SchemaRegistry",
    "Serializer",
    "Settings",
    "SideloaderError",
    "TypeDescription",
    "assemble",
    "camelize",
    "load_registry",
    "pluralize",
    "registry_from_metadata",
]
