"""Read KDL text into the node tree using the kdl-py parser."""

from __future__ import annotations

import logging
from typing import IO, Any

import kdl

from xml_kdl.errors import NotationParseError
from xml_kdl.nodes import (
    COMMENT_NODE_NAME,
    TEXT_NODE_NAME,
    Comment,
    Document,
    Element,
    Node,
    Text,
)

logger = logging.getLogger(__name__)

# Values stay as kdl-py objects so numbers keep their written form; type
# annotations are ignored.
_PARSE_CONFIG = kdl.ParseConfig(nativeUntaggedValues=False, nativeTaggedValues=False)


def _read_text(source: bytes | str | IO) -> str:
    if hasattr(source, "read"):
        source = source.read()
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")
    return source


def _stringify(value: Any) -> str:
    """Turn a parsed KDL value into the string the tree stores.

    Numbers keep the form they were written in (`1`, `2.5`, `1e3`, `0x10`)
    instead of going through a Python float.
    """
    if isinstance(value, kdl.Decimal):
        text = str(value.mantissa)
        if value.exponent:
            text += f"e{value.exponent}"
        return text
    if isinstance(value, kdl.Hex):
        return hex(value.value)
    if isinstance(value, kdl.Octal):
        return oct(value.value)
    if isinstance(value, kdl.Binary):
        return bin(value.value)
    if isinstance(value, kdl.Bool):
        return "true" if value.value else "false"
    if isinstance(value, kdl.Null):
        return "null"
    if isinstance(value, (kdl.String, kdl.RawString)):
        return value.value
    # Anything else a value converter may have produced
    return str(value)


class KdlReader:
    """Builds a Document from KDL text."""

    def parse(self, source: bytes | str | IO) -> Document:
        """Parse a KDL document.

        Args:
            source: KDL as bytes, str, or a readable stream.

        Returns:
            Document holding the node tree.

        Raises:
            NotationParseError: If the KDL parser rejects the input.
        """
        text = _read_text(source)
        try:
            parsed = kdl.parse(text, _PARSE_CONFIG)
        except kdl.ParseError as e:
            raise NotationParseError(str(e)) from e

        document = Document(nodes=[self._convert(node) for node in parsed.nodes])
        logger.debug(f"Imported {document.node_count} nodes from KDL")
        return document

    def _convert(self, node: kdl.Node) -> Node:
        args = [_stringify(arg) for arg in node.args]

        if node.name == COMMENT_NODE_NAME:
            return Comment(args[0] if args else "")
        if node.name == TEXT_NODE_NAME:
            return Text(args[0] if args else "")

        element = Element(
            name=node.name,
            properties={key: _stringify(value) for key, value in node.props.items()},
            children=[self._convert(child) for child in node.nodes],
        )

        # A single trailing value with no block is how the writer spells a
        # lone text child.
        if len(args) == 1 and not element.children:
            element.children.append(Text(args[0]))
        else:
            element.arguments = args
        return element
