"""Helpers for querying vendor XML with ElementTree."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

# Start and end tags only; comments, PIs, doctype and CDATA are left alone.
_TAG = r"<(?![!?])[^<>]+>"
_XMLNS_DECL = r"""\s+xmlns(?::[\w.-]+)?\s*=\s*(?:"[^"]*"|'[^']*')"""
_ELEMENT_PREFIX = r"^<(/?)[\w.-]+:"
_ATTRIBUTE_PREFIX = r"(\s)[\w.-]+:([\w.-]+\s*=)"


def _compile(pattern: str) -> tuple[re.Pattern[str], re.Pattern[bytes]]:
    return re.compile(pattern), re.compile(pattern.encode())


_TAG_RE = _compile(_TAG)
_XMLNS_DECL_RE = _compile(_XMLNS_DECL)
_ELEMENT_PREFIX_RE = _compile(_ELEMENT_PREFIX)
_ATTRIBUTE_PREFIX_RE = _compile(_ATTRIBUTE_PREFIX)


def _local_name(name: str) -> str:
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


def strip_prefixes(body: bytes | str) -> bytes | str:
    """Remove namespace declarations and prefixes from raw markup.

    Runs before parsing so that an undeclared prefix, which ElementTree
    rejects as an unbound prefix, cannot fail the whole document.
    """
    i = 1 if isinstance(body, bytes) else 0
    empty = body[:0]

    def _clean_tag(match: re.Match) -> bytes | str:
        tag = _XMLNS_DECL_RE[i].sub(empty, match.group(0))
        tag = _ELEMENT_PREFIX_RE[i].sub(lambda m: m.group(0)[:1] + m.group(1), tag)
        return _ATTRIBUTE_PREFIX_RE[i].sub(lambda m: m.group(1) + m.group(2), tag)

    return _TAG_RE[i].sub(_clean_tag, body)


def parse_xml(body: bytes | str) -> ET.Element:
    """Parse a response body with all namespaces removed.

    Raises ``ET.ParseError`` for malformed or empty input.
    """
    root = ET.fromstring(strip_prefixes(body))
    strip_namespaces(root)
    return root


def strip_namespaces(root: ET.Element) -> ET.Element:
    """Rewrite every element and attribute name to its local part, in place.

    EBSCO's namespace usage is inconsistent, so path queries are written
    against bare names and only work on a stripped tree.
    """
    for el in root.iter():
        if not isinstance(el.tag, str):
            continue
        el.tag = _local_name(el.tag)
        if any(key.startswith("{") for key in el.attrib):
            attrib = {_local_name(k): v for k, v in el.attrib.items()}
            el.attrib.clear()
            el.attrib.update(attrib)
    return root


def node_text(node: ET.Element) -> str:
    """Concatenated text of the node and all its descendants."""
    return "".join(node.itertext())


def text_if_present(node: ET.Element | None, path: str, attr: str | None = None) -> str | None:
    """Text at ``path`` below ``node``, or None if absent or blank.

    With ``attr`` the attribute of the matched element is read instead.
    """
    if node is None:
        return None
    found = node.find(path)
    if found is None:
        return None
    text = found.get(attr) if attr else node_text(found)
    if text is None or not text.strip():
        return None
    return text


def has_children(node: ET.Element | None, path: str) -> bool:
    """True when the element at ``path`` exists and has child elements."""
    if node is None:
        return False
    return node.find(f"{path}/*") is not None
