"""K2 Document Parsing Adapter.

This adapter implements the DocumentParserPort contract for HMC K2 responses.
It uses defusedxml to parse response bodies and decodes Atom entries into
typed records through the type registry.

Security Impact:
    - Uses defusedxml to prevent Billion Laughs attacks and external entity
      resolution
    - Response bodies above the configured size are rejected before parsing

Architecture:
    - Implements DocumentParserPort (Hexagonal Architecture)
    - Isolated from transport: bodies are supplied by the caller
    - Fail-safe feeds: one unrecognized entry does not abort the others
      (unless strict_feeds is configured)

Document shapes:
    <entry>...</entry>                         single object response
    <feed><entry/><entry/>...</feed>           feed response
"""

import logging
from typing import Iterator, Optional, Union
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET
from defusedxml.ElementTree import ParseError as SafeParseError

from hmc_k2.domain import xpath
from hmc_k2.domain.ports import (
    DocumentParseError,
    DocumentParserPort,
    Result,
    UnknownTypeError,
)
from hmc_k2.domain.records import EntryRecord
from hmc_k2.domain.registry import DEFAULT_REGISTRY, TypeRegistry
from hmc_k2.infrastructure.config_manager import ParserConfig
from hmc_k2.infrastructure.settings import settings

logger = logging.getLogger(__name__)

TypeFilter = Union[str, type[EntryRecord], None]


def _filter_name(expected_type: TypeFilter) -> Optional[str]:
    if expected_type is None or isinstance(expected_type, str):
        return expected_type
    return expected_type.__name__


def entry_type(entry: Optional[Element]) -> Optional[str]:
    """Return the type name of an entry's content discriminant.

    The discriminant looks like
    ``application/vnd.ibm.powervm.uom+xml; type=ManagedSystem``; the type name
    is the text after the last '='.
    """
    discriminant = xpath.attribute(entry, "content[@type]", "type")
    if discriminant is None:
        return None
    return discriminant.rsplit("=", 1)[-1].strip()


def decode_entry(
    entry: Optional[Element],
    expected_type: TypeFilter = None,
    registry: TypeRegistry = DEFAULT_REGISTRY
) -> Optional[EntryRecord]:
    """Decode one Atom entry into a record.

    Parameters:
        entry: The <entry> element (None is accepted and yields None)
        expected_type: Type name or record class the entry must have; entries
            of another type yield None
        registry: Type name to record class table

    Returns:
        Optional[EntryRecord]: The record, or None if the entry has no typed,
        non-empty content or does not match expected_type

    Raises:
        UnknownTypeError: If the entry type is not registered
    """
    if entry is None:
        return None

    type_name = entry_type(entry)
    if type_name is None:
        logger.debug("Entry has no typed content; skipping")
        return None

    if xpath.first_child(xpath.find(entry, "content[@type]")) is None:
        logger.debug(f"Entry of type {type_name} has empty content; skipping")
        return None

    wanted = _filter_name(expected_type)
    if wanted is not None and wanted != type_name:
        return None

    record_cls = registry.get(type_name)
    if record_cls is None:
        raise UnknownTypeError(type_name, uuid=xpath.text(entry, "id"))

    return record_cls.from_entry(entry)


def iter_feed_results(
    feed: Optional[Element],
    filter_type: TypeFilter = None,
    registry: TypeRegistry = DEFAULT_REGISTRY
) -> Iterator[Result[EntryRecord]]:
    """Decode feed entries, yielding one Result per reported entry.

    Decoded entries yield a success; entries of an unregistered type yield a
    failure carrying entry_index, type_name and uuid. Filtered, malformed and
    envelope-less entries are dropped silently.

    Parameters:
        feed: The <feed> element
        filter_type: Only decode entries of this type name or record class
        registry: Type name to record class table

    Yields:
        Result[EntryRecord]: Outcomes in document order
    """
    for index, entry in enumerate(xpath.iter_find(feed, "entry")):
        try:
            record = decode_entry(entry, filter_type, registry)
        except UnknownTypeError as e:
            yield Result.failure_result(
                e,
                error_details={
                    'entry_index': index,
                    'type_name': e.type_name,
                    'uuid': e.uuid,
                }
            )
            continue

        if record is not None:
            yield Result.success_result(record)


def decode_feed(
    feed: Optional[Element],
    filter_type: TypeFilter = None,
    registry: TypeRegistry = DEFAULT_REGISTRY,
    strict: bool = False
) -> list[EntryRecord]:
    """Decode every entry of a feed, in document order.

    Entries of an unregistered type are skipped and reported with a warning;
    with strict=True the first one aborts the whole feed instead.

    Parameters:
        feed: The <feed> element
        filter_type: Only keep entries of this type name or record class
        registry: Type name to record class table
        strict: Raise on the first unknown entry type

    Returns:
        list[EntryRecord]: Decoded records (possibly empty)

    Raises:
        UnknownTypeError: In strict mode, on the first unknown entry type
    """
    if strict:
        records = (decode_entry(entry, filter_type, registry) for entry in xpath.iter_find(feed, "entry"))
        return [record for record in records if record is not None]

    records = []
    skipped = 0
    for result in iter_feed_results(feed, filter_type, registry):
        if result.is_success():
            records.append(result.value)
            continue

        skipped += 1
        logger.warning(
            f"Skipping feed entry {result.error_details['entry_index']}: {result.error}",
            extra=result.error_details
        )

    if skipped:
        logger.info(f"Feed decoded: {len(records)} records, {skipped} unknown entries skipped")
    return records


class K2Parser(DocumentParserPort):
    """Parser for one K2 response body (single entry or feed).

    The body is parsed once at construction; object()/objects() may then be
    called any number of times.

    Example Usage:
        ```python
        parser = K2Parser(response.text)
        for lpar in parser.objects("LogicalPartition"):
            print(lpar.name, lpar.state)
        ```
    """

    def __init__(
        self,
        body: Union[str, bytes],
        config: Optional[ParserConfig] = None,
        registry: TypeRegistry = DEFAULT_REGISTRY
    ):
        """Parse a response body.

        Parameters:
            body: Response body text or bytes
            config: Parser configuration (defaults to the environment settings)
            registry: Type name to record class table

        Raises:
            DocumentParseError: If the body is too large, not well-formed or
                rejected by defusedxml
        """
        self.config = config or settings.parser_config
        self.registry = registry
        self.root = self._parse(body)

    def _parse(self, body: Union[str, bytes]) -> Element:
        size = len(body.encode('utf-8') if isinstance(body, str) else body)
        if size > self.config.max_document_size:
            raise DocumentParseError(
                f"Document of {size} bytes exceeds maximum size "
                f"({self.config.max_document_size} bytes)"
            )

        try:
            return SafeET.fromstring(body, forbid_dtd=self.config.forbid_dtd)
        except SafeParseError as e:
            raise DocumentParseError(f"Invalid XML document: {str(e)}")
        except DefusedXmlException as e:
            raise DocumentParseError(f"Unsafe XML document rejected: {str(e)}")

    @property
    def root_name(self) -> str:
        return xpath.local_name(self.root.tag)

    def entry(self) -> Optional[Element]:
        """Return the entry element of a single-entry document."""
        return self.root if self.root_name == "entry" else None

    def feed(self) -> Optional[Element]:
        """Return the feed element of a feed document."""
        return self.root if self.root_name == "feed" else None

    def entries(self) -> list[Element]:
        """Return the entry elements of a feed document, in document order."""
        return xpath.find_all(self.feed(), "entry")

    def object(self, expected_type: TypeFilter = None) -> Optional[EntryRecord]:
        """Decode the entry of a single-entry document.

        Raises:
            UnknownTypeError: If the entry type is not registered
        """
        return decode_entry(self.entry(), expected_type, self.registry)

    def objects(self, expected_type: TypeFilter = None) -> list[EntryRecord]:
        """Decode the entries of a feed document.

        Raises:
            UnknownTypeError: Only when strict_feeds is configured
        """
        return decode_feed(self.feed(), expected_type, self.registry, strict=self.config.strict_feeds)

    def results(self, expected_type: TypeFilter = None) -> list[Result[EntryRecord]]:
        """Decode the entries of a feed document into per-entry Results."""
        return list(iter_feed_results(self.feed(), expected_type, self.registry))


def object_from_document(
    body: Union[str, bytes],
    expected_type: TypeFilter = None,
    config: Optional[ParserConfig] = None
) -> Optional[EntryRecord]:
    """Decode a single-entry response body.

    Returns None if the document is not an entry, the entry is malformed or
    it does not match expected_type.
    """
    return K2Parser(body, config=config).object(expected_type)


def objects_from_document(
    body: Union[str, bytes],
    expected_type: TypeFilter = None,
    config: Optional[ParserConfig] = None
) -> list[EntryRecord]:
    """Decode a feed response body into records, in document order."""
    return K2Parser(body, config=config).objects(expected_type)
