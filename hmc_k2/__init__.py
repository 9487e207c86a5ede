"""hmc-k2: typed records for HMC K2 REST API responses.

Example Usage:
    ```python
    from hmc_k2 import object_from_document, objects_from_document

    system = object_from_document(entry_body, "ManagedSystem")
    lpars = objects_from_document(feed_body, "LogicalPartition")
    ```
"""

from hmc_k2.adapters.k2_parser import (
    K2Parser,
    decode_entry,
    decode_feed,
    iter_feed_results,
    object_from_document,
    objects_from_document,
)
from hmc_k2.domain.ports import (
    DocumentParseError,
    FieldNotFoundError,
    InvalidPathError,
    K2ParserError,
    MalformedEntryError,
    Result,
    UnknownTypeError,
)
from hmc_k2.domain.records import EntryRecord, Record
from hmc_k2.domain.registry import DEFAULT_REGISTRY, TypeRegistry

__version__ = "0.1.0"

__all__ = [
    "K2Parser",
    "decode_entry",
    "decode_feed",
    "iter_feed_results",
    "object_from_document",
    "objects_from_document",
    "Record",
    "EntryRecord",
    "TypeRegistry",
    "DEFAULT_REGISTRY",
    "Result",
    "K2ParserError",
    "DocumentParseError",
    "UnknownTypeError",
    "MalformedEntryError",
    "FieldNotFoundError",
    "InvalidPathError",
]
