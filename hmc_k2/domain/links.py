"""Relationship resolution from K2 hyperlinks.

Relationships between K2 objects are encoded as ``link`` elements whose
``href`` points at the related object's canonical URL, for example::

    <AssociatedLogicalPartitions>
        <link href="https://hmc:12443/rest/api/uom/ManagedSystem/<sys>/LogicalPartition/<lpar>" rel="related"/>
    </AssociatedLogicalPartitions>

The trailing path segment of the URL is the related object's UUID; some
relationships address a segment further up (e.g. the owning system).
"""

from typing import Optional
from urllib.parse import urlparse
from xml.etree.ElementTree import Element

from hmc_k2.domain import xpath


def id_from_link(href: Optional[str], index: int = -1) -> Optional[str]:
    """Extract an identifier from a link target.

    Parameters:
        href: Link target URL
        index: Path segment to return, counted like a Python index
               (-1 is the object's own UUID, -3 its grandparent collection's)

    Returns:
        Optional[str]: The path segment, or None if href is empty or too short
    """
    if not href:
        return None
    segments = urlparse(href).path.rstrip("/").split("/")
    try:
        return segments[index] or None
    except IndexError:
        return None


def id_from_link_at(root: Optional[Element], path: str, index: int = -1) -> Optional[str]:
    """Resolve the href of the first element at path into an identifier."""
    return id_from_link(xpath.attribute(root, path, "href"), index)


def ids_from_links(root: Optional[Element], collection_path: str, index: int = -1) -> list[str]:
    """Resolve every link under a collection element into identifiers.

    Links without an href are skipped and links that do not resolve are
    dropped; document order is preserved and duplicates are kept.

    Parameters:
        root: Subtree to search
        collection_path: Path of the element holding the link siblings
        index: Path segment to return from each link target

    Returns:
        list[str]: Identifiers in document order
    """
    ids = []
    for link in xpath.iter_find(root, f"{collection_path}/link[@href]"):
        uuid = id_from_link(xpath.get_attribute(link, "href"), index)
        if uuid is not None:
            ids.append(uuid)
    return ids
