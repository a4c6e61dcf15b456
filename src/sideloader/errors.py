"""Exceptions raised by the sideloader core."""

from __future__ import annotations


class SideloaderError(Exception):
    """Base class for all serializer errors."""


class InvalidInput(SideloaderError):
    """Raised when ingestion is called without a usable record."""


class SchemaMismatch(SideloaderError):
    """Raised when a record or association does not match the registry."""


class MissingIdentity(SideloaderError):
    """Raised when a record lacks a usable type tag or id."""
