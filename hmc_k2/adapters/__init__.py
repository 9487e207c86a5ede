"""Adapters layer for hmc-k2.

This module contains the K2 document parser, which implements the
DocumentParserPort defined in the domain layer and turns response bodies
into domain records.
"""

from hmc_k2.adapters.k2_parser import (
    K2Parser,
    decode_entry,
    decode_feed,
    iter_feed_results,
    object_from_document,
    objects_from_document,
)

__all__ = [
    "K2Parser",
    "decode_entry",
    "decode_feed",
    "iter_feed_results",
    "object_from_document",
    "objects_from_document",
]
