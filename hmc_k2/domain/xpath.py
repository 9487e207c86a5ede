"""Path lookups over K2 document trees.

K2 responses mix the Atom namespace, the UOM namespace and per-type prefixes,
so schema paths are written without namespaces and every element step is
rewritten to ElementTree's namespace-agnostic ``{*}Name`` form before it is
handed to ``Element.find``/``Element.iterfind``. The supported expressions
are the subset the entity schemas need:

    SystemName                                  child chain
    AssociatedSystemMemoryConfiguration/InstalledSystemMemory
    PartitionProcessorConfiguration/*/MaximumVirtualProcessors
    link[@rel='SELF']                           attribute equals literal
    content[@type]                              attribute present
    etag:etag                                   prefix is ignored

Evaluation is first-match in document order. A lookup that does not match
returns None; absence of optional data is the normal case.
"""

from typing import Iterator, Optional
from xml.etree.ElementTree import Element

from hmc_k2.domain.ports import InvalidPathError


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from a name."""
    if tag.startswith("{"):
        tag = tag.rsplit("}", 1)[-1]
    return tag.rsplit(":", 1)[-1]


def _steps(path: str) -> Iterator[str]:
    # Split on '/' outside of predicates so literals may contain slashes.
    depth, start = 0, 0
    for pos, char in enumerate(path):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == "/" and depth == 0:
            yield path[start:pos]
            start = pos + 1
    yield path[start:]


def _element_step(step: str, path: str) -> str:
    name, bracket, predicate = step.partition("[")
    name = name.strip()
    if not name or (bracket and not predicate.startswith("@")):
        raise InvalidPathError(f"Invalid path step '{step}' in '{path}'", path=path)
    if name in (".", "*"):
        return step
    return f"{{*}}{local_name(name)}{bracket}{predicate}"


def element_path(path: str) -> str:
    """Rewrite a schema path into a namespace-agnostic ElementPath expression.

    Parameters:
        path: Path expression (empty string or '.' address the root itself)

    Returns:
        str: Expression for Element.find/iterfind

    Raises:
        InvalidPathError: If a step is empty or uses an unsupported predicate
    """
    path = path.strip()
    if path in ("", "."):
        return "."
    return "/".join(_element_step(step, path) for step in _steps(path))


def get_attribute(elem: Element, name: str) -> Optional[str]:
    """Return an attribute by exact name, falling back to its local name."""
    value = elem.get(name)
    if value is not None:
        return value
    for key, candidate in elem.attrib.items():
        if local_name(key) == name:
            return candidate
    return None


def iter_find(root: Optional[Element], path: str) -> Iterator[Element]:
    """Yield every element matching path under root, in document order.

    Raises:
        InvalidPathError: If path is not a supported expression
    """
    if root is None:
        return iter(())
    expression = element_path(path)
    try:
        return root.iterfind(expression)
    except SyntaxError as e:
        raise InvalidPathError(f"Invalid path '{path}': {e}", path=path)


def find(root: Optional[Element], path: str) -> Optional[Element]:
    """Return the first element matching path, or None."""
    return next(iter_find(root, path), None)


def find_all(root: Optional[Element], path: str) -> list[Element]:
    """Return all elements matching path, in document order."""
    return list(iter_find(root, path))


def first_child(root: Optional[Element]) -> Optional[Element]:
    """Return the first child element of root, skipping comments."""
    if root is None:
        return None
    return next((child for child in root if isinstance(child.tag, str)), None)


def text(root: Optional[Element], path: str) -> Optional[str]:
    """Return the stripped text of the first element matching path.

    Returns None when nothing matches or the element carries no text.
    """
    elem = find(root, path)
    if elem is None or elem.text is None:
        return None
    return elem.text.strip()


def attribute(root: Optional[Element], path: str, name: str) -> Optional[str]:
    """Return an attribute of the first element matching path, or None."""
    elem = find(root, path)
    if elem is None:
        return None
    return get_attribute(elem, local_name(name))
