"""Record Base Models.

This module defines the schema-driven base models every K2 entity is built
on. A concrete entity is a Pydantic model whose fields are declared with
``field_at(path)``; the ordered mapping of field name to path expression
(``ATTRS``) is computed once when the class is created, so a subclass copies
and extends its parent's schema at definition time.

Two shapes exist:
    - Record: built directly from a document subtree (nested objects such as
      I/O adapters or physical volumes)
    - EntryRecord: built from an Atom entry; adds the envelope metadata
      (uuid, published, href, etag, content_type) and builds its schema fields
      from the first child of the entry's content wrapper

Architecture:
    - One generic populate() step drives every entity; entity classes only
      declare fields and add relationship accessors
    - Records are snapshots of the tree at parse time; the only in-place
      update writes one schema field back to the owned subtree
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Optional, TypeVar
from xml.etree.ElementTree import Element

from pydantic import BaseModel, Field, PrivateAttr

from hmc_k2.domain import links, xpath
from hmc_k2.domain.ports import FieldNotFoundError, MalformedEntryError

logger = logging.getLogger(__name__)

XPATH_KEY = "xpath"

R = TypeVar("R", bound="Record")


def field_at(path: str, description: Optional[str] = None) -> Any:
    """Declare a schema field read from the text of the element at path."""
    return Field(None, description=description, json_schema_extra={XPATH_KEY: path})


def schema_of(model_cls: type[BaseModel]) -> Mapping[str, str]:
    """Build the ordered, read-only field-name to path mapping of a model.

    Parameters:
        model_cls: Model class whose fields were declared with field_at()

    Returns:
        Mapping[str, str]: Schema fields in declaration order (inherited
        fields first, overrides keep their inherited position)
    """
    schema = {}
    for name, info in model_cls.model_fields.items():
        extra = info.json_schema_extra
        if isinstance(extra, dict) and XPATH_KEY in extra:
            schema[name] = extra[XPATH_KEY]
    return MappingProxyType(schema)


def populate(schema: Mapping[str, str], node: Element) -> dict[str, Optional[str]]:
    """Read every schema field from node.

    Returns exactly the schema keys, in schema order; each value is the
    stripped element text or None when the element is absent.
    """
    return {name: xpath.text(node, path) for name, path in schema.items()}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; absent or malformed values yield None.

    Only full date-time values are accepted (a 'T' separator is required), so
    bare dates and numeric strings are rejected rather than reinterpreted.
    """
    if not value:
        return None
    value = value.strip()
    if "T" not in value:
        logger.debug(f"Ignoring malformed timestamp: {value!r}")
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        logger.debug(f"Ignoring malformed timestamp: {value!r}")
        return None


class Record(BaseModel):
    """K2 object built from a document subtree.

    The record owns the subtree it was built from (``xml``); nested records
    built through children() alias disjoint parts of the same tree.
    """

    ATTRS: ClassVar[Mapping[str, str]] = MappingProxyType({})

    _xml: Optional[Element] = PrivateAttr(default=None)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.ATTRS = schema_of(cls)

    @classmethod
    def from_xml(cls: type[R], node: Optional[Element]) -> R:
        """Build a record from a document subtree.

        Parameters:
            node: Element holding the entity's fields

        Returns:
            Record: Instance with every schema field populated

        Raises:
            MalformedEntryError: If node is None
        """
        if node is None:
            raise MalformedEntryError(f"Cannot build {cls.__name__} from a missing element")
        record = cls(**populate(cls.ATTRS, node))
        record._xml = node
        return record

    @property
    def xml(self) -> Optional[Element]:
        """The subtree this record was built from."""
        return self._xml

    def fields(self) -> dict[str, Optional[str]]:
        """Return the schema fields and their values, in schema order."""
        return {name: getattr(self, name) for name in self.ATTRS}

    def text(self, path: str) -> Optional[str]:
        return xpath.text(self._xml, path)

    def attribute(self, path: str, name: str) -> Optional[str]:
        return xpath.attribute(self._xml, path, name)

    def id_from_link(self, path: str, index: int = -1) -> Optional[str]:
        """Resolve the href of the element at path into an identifier."""
        return links.id_from_link_at(self._xml, path, index)

    def ids_from_links(self, collection_path: str, index: int = -1) -> list[str]:
        """Resolve the links under collection_path into identifiers."""
        return links.ids_from_links(self._xml, collection_path, index)

    def children(self, path: str, record_cls: type[R]) -> list[R]:
        """Build a nested record for every element at path."""
        return [record_cls.from_xml(elem) for elem in xpath.iter_find(self._xml, path)]

    def child(self, path: str, record_cls: type[R]) -> Optional[R]:
        """Build a nested record from the first element at path, if any."""
        elem = xpath.find(self._xml, path)
        return None if elem is None else record_cls.from_xml(elem)

    def _update_field(self, field: str, value: str) -> None:
        """Write a schema field back to the owned subtree and to the record.

        Raises:
            FieldNotFoundError: If field is not a schema field or its element
                is absent from the subtree
        """
        path = self.ATTRS.get(field)
        if path is None:
            raise FieldNotFoundError(
                f"{type(self).__name__} has no schema field '{field}'",
                field=field
            )
        elem = xpath.find(self._xml, path)
        if elem is None:
            raise FieldNotFoundError(
                f"Element '{path}' for field '{field}' is absent from the document",
                field=field,
                path=path
            )
        elem.text = value
        setattr(self, field, value)

    def __str__(self) -> str:
        lines = [f"{type(self).__name__}:"]
        for name in self.ATTRS:
            value = getattr(self, name)
            rendered = "null" if value is None else f"'{value}'"
            lines.append(f"  {name}: {rendered}")
        return "\n".join(lines) + "\n"


class EntryRecord(Record):
    """K2 REST object built from an Atom entry.

    The entry looks like this:

        <entry>
          <id>uuid</id>
          <published>timestamp</published>
          <link rel="SELF" href="https://..."/>
          <etag:etag>ETag</etag:etag>
          <content type="application/vnd.ibm.powervm.uom+xml; type=ManagedSystem">
            <!-- schema fields are read from the first child -->
          </content>
        </entry>

    Attributes:
        uuid: The UUID of the object contained in the entry
        published: The time at which the entry was published (None if absent
            or malformed)
        href: The URL of the object itself
        etag: The entity tag of the entry
        content_type: The content type discriminant of the entry
    """

    uuid: Optional[str] = Field(None, description="Entry identifier")
    published: Optional[datetime] = Field(None, description="Publish time")
    href: Optional[str] = Field(None, description="Self link")
    etag: Optional[str] = Field(None, description="Entity tag")
    content_type: Optional[str] = Field(None, description="Content type discriminant")

    _entry: Optional[Element] = PrivateAttr(default=None)

    @classmethod
    def from_entry(cls: type[R], entry: Optional[Element]) -> R:
        """Build a record from an Atom entry element.

        Parameters:
            entry: The <entry> element

        Returns:
            EntryRecord: Instance with envelope and schema fields populated

        Raises:
            MalformedEntryError: If the entry or its content is missing or empty
        """
        content = xpath.find(entry, "content")
        node = xpath.first_child(content)
        if node is None:
            raise MalformedEntryError(f"Cannot build {cls.__name__}: entry has no content")

        record = cls(
            uuid=xpath.text(entry, "id"),
            published=parse_timestamp(xpath.text(entry, "published")),
            href=xpath.attribute(entry, "link[@rel='SELF']", "href"),
            etag=xpath.text(entry, "etag:etag"),
            content_type=xpath.get_attribute(content, "type"),
            **populate(cls.ATTRS, node),
        )
        record._xml = node
        record._entry = entry
        return record

    @property
    def entry(self) -> Optional[Element]:
        """The entry element this record was built from."""
        return self._entry

    def __str__(self) -> str:
        published = "" if self.published is None else self.published.isoformat()
        return super().__str__() + f"  uuid: '{self.uuid}'\n  published: '{published}'\n"
