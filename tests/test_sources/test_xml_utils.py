"""Tests for ElementTree helpers."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from ebsco_search.sources.xml_utils import (
    has_children,
    node_text,
    parse_xml,
    strip_namespaces,
    strip_prefixes,
    text_if_present,
)


class TestStripNamespaces:
    def test_default_namespace(self):
        root = parse_xml(b'<a xmlns="urn:x"><b>1</b></a>')
        assert root.tag == "a"
        assert root.find("b").text == "1"

    def test_prefixed_elements_and_attributes(self):
        root = parse_xml(
            b'<p:a xmlns:p="urn:p" xmlns:q="urn:q"><p:b q:type="doi">x</p:b></p:a>'
        )
        b = root.find("b[@type='doi']")
        assert b is not None
        assert b.text == "x"

    def test_undeclared_prefixes(self):
        root = parse_xml(b'<x:a><x:b y:type="doi">v</x:b></x:a>')
        assert root.tag == "a"
        assert root.find("b[@type='doi']").text == "v"

    def test_prefix_strip_leaves_text_alone(self):
        out = strip_prefixes(
            b'<?xml version="1.0"?><p:a xmlns:p="urn:p"><p:u>http://x y:z=1</p:u></p:a>'
        )
        assert out == b'<?xml version="1.0"?><a><u>http://x y:z=1</u></a>'

    def test_prefix_strip_str_input(self):
        assert strip_prefixes('<p:a p:k="1"/>') == '<a k="1"/>'

    def test_in_place(self):
        root = ET.fromstring('<a xmlns="urn:x"><b/></a>')
        assert strip_namespaces(root) is root
        assert [el.tag for el in root.iter()] == ["a", "b"]

    def test_malformed(self):
        with pytest.raises(ET.ParseError):
            parse_xml(b"<a>")


class TestTextIfPresent:
    def test_text(self):
        root = ET.fromstring("<a><b>hello</b></a>")
        assert text_if_present(root, "b") == "hello"

    def test_descendant_text_included(self):
        root = ET.fromstring("<a><b>one <i>two</i> three</b></a>")
        assert text_if_present(root, "b") == "one two three"
        assert node_text(root.find("b")) == "one two three"

    def test_text_not_stripped(self):
        root = ET.fromstring("<a><b> padded </b></a>")
        assert text_if_present(root, "b") == " padded "

    def test_missing_or_blank(self):
        root = ET.fromstring("<a><b>  </b><c/></a>")
        assert text_if_present(root, "b") is None
        assert text_if_present(root, "c") is None
        assert text_if_present(root, "d") is None
        assert text_if_present(None, "b") is None

    def test_attribute(self):
        root = ET.fromstring('<a><dt year="2001" month=""/></a>')
        assert text_if_present(root, "dt", attr="year") == "2001"
        assert text_if_present(root, "dt", attr="month") is None
        assert text_if_present(root, "dt", attr="day") is None


class TestHasChildren:
    def test_children(self):
        root = ET.fromstring("<a><b><c/></b><d>text</d><e/></a>")
        assert has_children(root, "b") is True
        assert has_children(root, "d") is False
        assert has_children(root, "e") is False
        assert has_children(root, "missing") is False
        assert has_children(None, "b") is False
