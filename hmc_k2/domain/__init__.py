"""Domain layer for hmc-k2.

This module contains the mapping engine (path lookups, relationship
resolution, schema-driven records, type registry) and the K2 entity catalog.
All domain models are pure Python with no external dependencies beyond Pydantic.
"""

from .records import EntryRecord, Record, field_at
from .registry import DEFAULT_REGISTRY, TypeRegistry
from .catalog import *  # noqa: F401,F403
from .catalog import TOP_LEVEL_TYPES

__all__ = [
    "Record",
    "EntryRecord",
    "field_at",
    "TypeRegistry",
    "DEFAULT_REGISTRY",
    "TOP_LEVEL_TYPES",
]
