# xml-ingestor/src/xml_ingestor/decoder.py
"""
XML payload decoding.

decode() is a pure function of its input bytes: the same bytes always give
an equal XmlNode tree, so redelivered notifications are safe to re-parse.
Both directions walk the tree with an explicit stack; documents nested
deeper than the interpreter's recursion limit are valid input.
"""
from __future__ import annotations

import io
from typing import Dict, List, Optional, Tuple
from xml.etree import ElementTree as ET
from xml.sax.saxutils import XMLGenerator

from .errors import DecodeError
from .models import XmlNode

XML_NS = "http://www.w3.org/XML/1998/namespace"


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


def _to_node(el: ET.Element) -> XmlNode:
    return XmlNode(tag=el.tag, attributes=dict(el.attrib))


def decode(data: bytes) -> XmlNode:
    """Parse UTF-8 XML bytes into an XmlNode tree. Raises DecodeError on bad input."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"payload is not valid UTF-8 at byte {e.start}") from e
    if not text.strip():
        raise DecodeError("payload is empty")

    try:
        root_el = ET.fromstring(text)
    except ET.ParseError as e:
        line, column = e.position
        reason = str(e).split(":")[0]  # expat appends its own position
        raise DecodeError(f"malformed XML: {reason}", line, column) from e

    root = _to_node(root_el)
    stack: List[Tuple[ET.Element, XmlNode]] = [(root_el, root)]
    while stack:
        el, node = stack.pop()
        # mixed content: text after a child element joins the parent's text
        parts = [_clean(el.text)]
        for child_el in el:
            child = _to_node(child_el)
            node.children.append(child)
            stack.append((child_el, child))
            parts.append(_clean(child_el.tail))
        node.text = " ".join(p for p in parts if p) or None
    return root


def _split(name: str) -> Tuple[str, str]:
    if name.startswith("{"):
        uri, local = name[1:].split("}", 1)
        return uri, local
    return "", name


def _qualify(node: XmlNode, default_ns: str) -> Tuple[str, Dict[str, str], str]:
    """Element name and attributes with Clark names turned into declarations."""
    ns, local = _split(node.tag)
    attrs: Dict[str, str] = {}
    if ns != default_ns:
        attrs["xmlns"] = ns
    prefixes: Dict[str, str] = {}
    for name, value in node.attributes.items():
        attr_ns, attr_local = _split(name)
        if not attr_ns:
            attrs[name] = value
        elif attr_ns == XML_NS:
            attrs[f"xml:{attr_local}"] = value
        else:
            if attr_ns not in prefixes:
                prefixes[attr_ns] = f"ns{len(prefixes)}"
                attrs[f"xmlns:{prefixes[attr_ns]}"] = attr_ns
            attrs[f"{prefixes[attr_ns]}:{attr_local}"] = value
    return local, attrs, ns


def encode(node: XmlNode) -> bytes:
    """Serialize a tree back to UTF-8 XML bytes."""
    out = io.BytesIO()
    gen = XMLGenerator(out, encoding="utf-8", short_empty_elements=True)
    gen.startDocument()
    # entries are (node, inherited default namespace) to open, or a name to close
    stack: List[object] = [(node, "")]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            gen.endElement(item)
            continue
        current, default_ns = item
        name, attrs, ns = _qualify(current, default_ns)
        gen.startElement(name, attrs)
        if current.text:
            gen.characters(current.text)
        stack.append(name)
        for child in reversed(current.children):
            stack.append((child, ns))
    gen.endDocument()
    return out.getvalue()
