"""Unit tests for path lookups over K2 document trees."""

import pytest
from defusedxml import ElementTree as SafeET

from hmc_k2.domain import xpath
from hmc_k2.domain.catalog import IOAdapter, Node, PhysicalVolume
from hmc_k2.domain.ports import InvalidPathError
from hmc_k2.domain.registry import DEFAULT_REGISTRY


DOC = """<root xmlns="http://www.w3.org/2005/Atom" xmlns:etag="urn:etag">
    <!-- leading comment -->
    <link rel="related" href="https://hmc/a"/>
    <link rel="SELF" href="https://hmc/self"/>
    <etag:etag>12345</etag:etag>
    <Config>
        <Shared><Procs>  4  </Procs></Shared>
        <Dedicated><Procs>2</Procs></Dedicated>
    </Config>
    <Empty/>
    <Item id="1">first</Item>
    <Item id="2">second</Item>
</root>"""


@pytest.fixture
def root():
    return SafeET.fromstring(DOC)


class TestLocalName:
    """Test namespace and prefix stripping."""

    def test_strips_clark_namespace(self):
        assert xpath.local_name("{http://www.w3.org/2005/Atom}entry") == "entry"

    def test_strips_prefix(self):
        assert xpath.local_name("etag:etag") == "etag"

    def test_plain_name_unchanged(self):
        assert xpath.local_name("SystemName") == "SystemName"


class TestElementPath:
    """Test rewriting of schema paths into ElementPath expressions."""

    def test_child_chain(self):
        assert xpath.element_path("Config/Shared/Procs") == "{*}Config/{*}Shared/{*}Procs"

    def test_wildcard_step_kept(self):
        assert xpath.element_path("Config/*/Procs") == "{*}Config/*/{*}Procs"

    def test_predicates_kept(self):
        assert xpath.element_path("link[@rel='SELF']") == "{*}link[@rel='SELF']"
        assert xpath.element_path("content[@type]") == "{*}content[@type]"

    def test_literal_may_contain_slash(self):
        assert xpath.element_path("link[@href='https://hmc/a']") == "{*}link[@href='https://hmc/a']"

    def test_prefix_dropped(self):
        assert xpath.element_path("etag:etag") == "{*}etag"

    def test_dot_addresses_root(self, root):
        assert xpath.element_path("") == "."
        assert xpath.find(root, ".") is root

    @pytest.mark.parametrize("path", ["Config//Procs", "link[@rel=SELF]", "a[b]", "Config/", "/Config"])
    def test_invalid_paths_raise(self, root, path):
        with pytest.raises(InvalidPathError) as exc_info:
            xpath.find(root, path)
        assert exc_info.value.path == path

    def test_every_catalog_path_is_valid(self, root):
        for record_cls in [*(DEFAULT_REGISTRY.get(name) for name in DEFAULT_REGISTRY), IOAdapter, PhysicalVolume, Node]:
            for path in record_cls.ATTRS.values():
                xpath.find(root, path)


class TestFind:
    """Test first-match lookups."""

    def test_matches_by_local_name(self, root):
        assert xpath.find(root, "Config/Dedicated/Procs").text == "2"

    def test_first_match_in_document_order(self, root):
        assert xpath.text(root, "Config/*/Procs") == "4"

    def test_attribute_predicate(self, root):
        assert xpath.attribute(root, "link[@rel='SELF']", "href") == "https://hmc/self"

    def test_prefixed_name(self, root):
        assert xpath.text(root, "etag:etag") == "12345"

    def test_missing_path_returns_none(self, root):
        assert xpath.find(root, "Config/Virtual/Procs") is None
        assert xpath.text(root, "Nope") is None
        assert xpath.attribute(root, "Nope", "href") is None

    def test_missing_attribute_returns_none(self, root):
        assert xpath.attribute(root, "Config", "href") is None

    def test_none_root(self):
        assert xpath.find(None, "anything") is None
        assert xpath.find_all(None, "anything") == []

    def test_text_is_stripped(self, root):
        assert xpath.text(root, "Config/Shared/Procs") == "4"

    def test_empty_element_text_is_none(self, root):
        assert xpath.find(root, "Empty") is not None
        assert xpath.text(root, "Empty") is None

    def test_find_all_keeps_order(self, root):
        assert [e.get("id") for e in xpath.find_all(root, "Item")] == ["1", "2"]


class TestFirstChild:
    """Test first child element lookup."""

    def test_skips_comments(self, root):
        assert xpath.local_name(xpath.first_child(root).tag) == "link"

    def test_leaf_has_no_child(self, root):
        assert xpath.first_child(xpath.find(root, "Empty")) is None

    def test_none_root(self):
        assert xpath.first_child(None) is None
