"""Import XML documents into the node tree."""

from __future__ import annotations

import logging
import re
from typing import IO

from lxml import etree

from xml_kdl.errors import XmlDecodeError
from xml_kdl.nodes import Comment, Document, Element, Node, Text

logger = logging.getLogger(__name__)

SUPPORTED_ENCODINGS = {"utf-8", "utf8", "us-ascii", "ascii"}

COMMENT_PREFIX = "//"
MARKUP_PREFIX = "<"
PROPERTY_SHORTHAND_PREFIX = "property "

FRAGMENT_ROOT = "frag"

_BOM = b"\xef\xbb\xbf"
_DECLARATION = re.compile(rb"\A\s*<\?xml\s.*?\?>", re.DOTALL)
_ENCODING = re.compile(rb"""encoding\s*=\s*["']([A-Za-z0-9._\-]+)["']""")
# A DOCTYPE can only follow comments and processing instructions.
_DOCTYPE = re.compile(
    rb"\A((?:\s|<!--(?:[^-]|-(?!->))*-->|<\?[^?]*(?:\?(?!>)[^?]*)*\?>)*)"
    rb"<!DOCTYPE\s[^\[>]*(?:\[[^\]]*\]\s*)?>"
)


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True)


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


def _read_source(source: bytes | str | IO) -> bytes:
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, str):
        return source.encode("utf-8")
    return bytes(source)


def _split_prolog(data: bytes) -> tuple[str, bytes]:
    """Remove the XML declaration and DOCTYPE.

    Returns:
        The declared encoding (UTF-8 when undeclared) and the remaining markup.
    """
    if data.startswith(_BOM):
        data = data[len(_BOM):]

    encoding = "UTF-8"
    declaration = _DECLARATION.match(data)
    if declaration:
        found = _ENCODING.search(declaration.group(0))
        if found:
            encoding = found.group(1).decode("ascii")
        data = data[declaration.end():]

    return encoding, _DOCTYPE.sub(rb"\1", data, count=1)


def parse_fragment(text: str) -> list[Node] | None:
    """Parse a line of inline markup found inside character data.

    The text is wrapped in a synthetic root element so that several sibling
    elements, or elements mixed with text, parse as one unit.

    Returns:
        The nodes found inside the synthetic root, or None if the text is
        not well-formed markup.
    """
    try:
        root = etree.fromstring(
            f"<{FRAGMENT_ROOT}>{text}</{FRAGMENT_ROOT}>", _make_parser()
        )
    except etree.XMLSyntaxError as e:
        logger.debug(f"Not a markup fragment ({e}): {text!r}")
        return None

    nodes: list[Node] = []
    _append_fragment_text(root.text, nodes)
    for child in root:
        if isinstance(child.tag, str):
            nodes.append(_fragment_element(child))
        _append_fragment_text(child.tail, nodes)
    return nodes


def _fragment_element(elem: etree._Element) -> Element:
    node = Element(
        name=_local_name(elem.tag),
        properties={_local_name(k): v for k, v in elem.attrib.items()},
    )
    _append_fragment_text(elem.text, node.children)
    for child in elem:
        # Comments inside fragments carry no content worth keeping
        if isinstance(child.tag, str):
            node.children.append(_fragment_element(child))
        _append_fragment_text(child.tail, node.children)
    return node


def _append_fragment_text(text: str | None, siblings: list[Node]) -> None:
    if text and text.strip():
        siblings.append(Text(text.strip()))


class XmlImporter:
    """Builds a Document from XML markup."""

    def parse(self, source: bytes | str | IO) -> Document:
        """Parse an XML document.

        Args:
            source: XML as bytes, str, or a readable stream.

        Returns:
            Document holding the imported node tree.

        Raises:
            XmlDecodeError: If the markup is malformed or the declared
                encoding is not UTF-8 or US-ASCII.
        """
        data = _read_source(source)
        document = Document()
        if not data.strip():
            return document

        encoding, body = _split_prolog(data)
        if encoding.lower() not in SUPPORTED_ENCODINGS:
            raise XmlDecodeError(f"unsupported charset: {encoding}")

        # Everything after the prolog is read inside a synthetic root, so
        # several root elements, loose text and comment-only files all import.
        root_tag = FRAGMENT_ROOT.encode("ascii")
        try:
            wrapper = etree.fromstring(
                b"<" + root_tag + b">" + body + b"</" + root_tag + b">", _make_parser()
            )
        except etree.XMLSyntaxError as e:
            raise XmlDecodeError(f"decode: {e}") from e

        self._import_content(wrapper, document.nodes)

        logger.debug(f"Imported {document.node_count} nodes from XML")
        return document

    def _import_element(self, elem: etree._Element, siblings: list[Node]) -> None:
        """Import an element and its content, appending it to siblings."""
        node = Element(name=_local_name(elem.tag))
        for key, value in elem.attrib.items():
            node.properties[_local_name(key)] = value
        siblings.append(node)
        self._import_content(elem, node.children)

    def _import_content(self, parent: etree._Element, siblings: list[Node]) -> None:
        """Import the text, comments and elements inside parent."""
        self._import_char_data(parent.text, siblings)
        for child in parent:
            if child.tag is etree.Comment:
                siblings.append(Comment(child.text or ""))
            elif isinstance(child.tag, str):
                self._import_element(child, siblings)
            # Text after a child belongs to the parent
            self._import_char_data(child.tail, siblings)

    def _import_char_data(self, chunk: str | None, siblings: list[Node]) -> None:
        """Classify each non-blank line of a character data chunk."""
        if not chunk:
            return

        for line in chunk.split("\n"):
            text = line.strip()
            if not text:
                continue

            if text.startswith(COMMENT_PREFIX):
                siblings.append(Comment(text[len(COMMENT_PREFIX):].strip()))
                continue

            fragment = None
            if text.startswith(MARKUP_PREFIX):
                fragment = text
            elif text.startswith(PROPERTY_SHORTHAND_PREFIX):
                fragment = f"<{text}/>"

            if fragment is not None:
                nodes = parse_fragment(fragment)
                if nodes:
                    siblings.extend(nodes)
                    continue

            siblings.append(Text(text))
