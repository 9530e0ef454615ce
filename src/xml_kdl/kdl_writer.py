"""Write the node tree as KDL text."""

from __future__ import annotations

import io
import logging
import re
from typing import TextIO

from xml_kdl.config import Settings
from xml_kdl.nodes import (
    RESERVED_PREFIX,
    TEXT_NODE_NAME,
    Comment,
    Document,
    Element,
    Node,
    Text,
)

logger = logging.getLogger(__name__)

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# A bare identifier: no character KDL reserves, and no leading digit, sign or dot.
_BARE_IDENTIFIER = re.compile(
    r'[^\s\\/(){}<>;\[\]=,"#0-9+\-.][^\s\\/(){}<>;\[\]=,"#]*'
)
_KEYWORDS = {"true", "false", "null", "inf", "nan"}


def escape(value: str) -> str:
    """Escape a string for use inside a quoted KDL value."""
    parts = []
    for char in value:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 0x20:
            parts.append(f"\\u{{{ord(char):04X}}}")
        else:
            parts.append(char)
    return "".join(parts)


def quote(value: str) -> str:
    """Render a string as a quoted KDL value."""
    return f'"{escape(value)}"'


def identifier(name: str) -> str:
    """Render a node name or property key, quoting it when it can't be bare."""
    if (
        name.startswith(RESERVED_PREFIX)
        or name in _KEYWORDS
        or not _BARE_IDENTIFIER.fullmatch(name)
    ):
        return quote(name)
    return name


class KdlWriter:
    """Serializes a Document to deterministic KDL."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.default()

    def dumps(self, document: Document) -> str:
        """Return the KDL text for a document."""
        buffer = io.StringIO()
        self.write(document, buffer)
        return buffer.getvalue()

    def write(self, document: Document, stream: TextIO) -> None:
        """Write a document to a text stream.

        Top-level nodes are separated by a blank line. Errors raised by the
        stream propagate unchanged.
        """
        for i, node in enumerate(document.nodes):
            self._emit_node(stream, node, 0)
            if i < len(document.nodes) - 1:
                stream.write("\n")
        logger.debug(f"Wrote {len(document.nodes)} top-level nodes as KDL")

    def _indent(self, depth: int) -> str:
        return self.settings.kdl.indent * depth

    def _emit_node(self, stream: TextIO, node: Node, depth: int) -> None:
        if isinstance(node, Comment):
            self._emit_comment(stream, node, depth)
        elif isinstance(node, Text):
            stream.write(
                f"{self._indent(depth)}{quote(TEXT_NODE_NAME)} {quote(node.value)}\n"
            )
        else:
            self._emit_element(stream, node, depth)

    def _emit_comment(self, stream: TextIO, node: Comment, depth: int) -> None:
        text = node.value.replace("\r\n", "\n")
        for line in text.split("\n"):
            content = line.rstrip(" \t")
            if content:
                stream.write(f"{self._indent(depth)}// {content}\n")
            else:
                stream.write(f"{self._indent(depth)}//\n")

    def _emit_element(self, stream: TextIO, node: Element, depth: int) -> None:
        parts = [identifier(node.name)]
        parts.extend(quote(arg) for arg in node.arguments)
        for key, value in node.ordered_properties(self.settings.attribute_order):
            parts.append(f"{identifier(key)}={quote(value)}")

        # A lone text child is written on the parent's own line
        inline = node.inline_text
        if inline is not None:
            parts.append(quote(inline.value))

        line = self._indent(depth) + " ".join(parts)
        if not node.children or inline is not None:
            stream.write(f"{line}\n")
            return

        stream.write(f"{line} {{\n")
        for child in node.children:
            self._emit_node(stream, child, depth + 1)
        stream.write(f"{self._indent(depth)}}}\n")
