"""Type Registry.

Maps the type name carried by an entry's content discriminant to the record
class that decodes it. A registry is immutable once built; extending it
returns a new registry, so a registry shared between threads never changes
under a reader.
"""

from types import MappingProxyType
from typing import Iterable, Iterator, Optional

from hmc_k2.domain.catalog import TOP_LEVEL_TYPES
from hmc_k2.domain.records import EntryRecord


class TypeRegistry:
    """Immutable type name to record class table.

    Example Usage:
        ```python
        registry = TypeRegistry.from_types([ManagedSystem, LogicalPartition])
        record_cls = registry.get("ManagedSystem")

        # Add a type without touching the default registry
        extended = DEFAULT_REGISTRY.with_types([MyNewType])
        ```
    """

    def __init__(self, types: Optional[dict[str, type[EntryRecord]]] = None):
        self._types = MappingProxyType(dict(types or {}))

    @classmethod
    def from_types(cls, record_classes: Iterable[type[EntryRecord]]) -> 'TypeRegistry':
        """Build a registry keyed by each class name.

        Parameters:
            record_classes: EntryRecord subclasses to register

        Returns:
            TypeRegistry: The new registry

        Raises:
            ValueError: If two classes share a name or a class is not an
                EntryRecord subclass
        """
        types: dict[str, type[EntryRecord]] = {}
        for record_cls in record_classes:
            if not (isinstance(record_cls, type) and issubclass(record_cls, EntryRecord)):
                raise ValueError(f"{record_cls!r} is not an EntryRecord subclass")
            name = record_cls.__name__
            if name in types:
                raise ValueError(f"Type '{name}' is registered twice")
            types[name] = record_cls
        return cls(types)

    def with_types(self, record_classes: Iterable[type[EntryRecord]]) -> 'TypeRegistry':
        """Return a new registry holding these types and the new ones."""
        return TypeRegistry.from_types([*self._types.values(), *record_classes])

    def get(self, type_name: str) -> Optional[type[EntryRecord]]:
        return self._types.get(type_name)

    def names(self) -> list[str]:
        return list(self._types)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"TypeRegistry({len(self._types)} types)"


# Built once at import time and read-only thereafter.
DEFAULT_REGISTRY = TypeRegistry.from_types(TOP_LEVEL_TYPES)
