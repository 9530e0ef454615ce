"""Write the node tree as XML."""

from __future__ import annotations

import logging
import re
from typing import TextIO

from lxml import etree

from xml_kdl.config import Settings
from xml_kdl.errors import XmlExportError
from xml_kdl.nodes import Comment, Document, Element, Text

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'

# Start tag and matching end tag separated only by whitespace. The lookbehind
# keeps already self-closed tags like <a/> out of the match.
_EMPTY_ELEMENT = re.compile(r"<([A-Za-z_:][\w.\-:]*)(\s[^<>]*?)?(?<!/)>\s*</\1\s*>")


def collapse_empty_elements(xml: str) -> str:
    """Rewrite every <tag ...></tag> with only whitespace inside as <tag .../>."""
    return _EMPTY_ELEMENT.sub(
        lambda match: f"<{match.group(1)}{match.group(2) or ''}/>", xml
    )


class XmlWriter:
    """Serializes a Document to XML with canonical attribute order."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.default()

    def dumps(self, document: Document) -> str:
        """Return the XML text for a document.

        Raises:
            XmlExportError: If a name or string can't be represented in XML.
        """
        parts = [XML_HEADER]
        elements = 0

        for node in document.nodes:
            if isinstance(node, Text):
                if node.value:
                    parts.append(self._escape_text(node.value))
                continue
            if isinstance(node, Comment):
                if self.settings.xml.emit_comments:
                    parts.append(self._serialize(self._build_comment(node)))
                continue

            elements += 1
            elem = self._build_element(node)
            etree.indent(elem, space=self.settings.xml.indent)
            parts.append(self._serialize(elem))

        if elements > 1:
            logger.warning(
                f"Document has {elements} top-level elements; "
                "the XML output will have several roots"
            )

        return collapse_empty_elements("\n".join(parts) + "\n")

    def write(self, document: Document, stream: TextIO) -> None:
        """Write a document to a text stream.

        The whole document is serialized before anything is written, so an
        export error never produces partial output.
        """
        stream.write(self.dumps(document))

    def _serialize(self, elem: etree._Element) -> str:
        return etree.tostring(elem, encoding="unicode")

    def _escape_text(self, value: str) -> str:
        """Escape character data that sits outside any element."""
        holder = etree.Element("t")
        try:
            holder.text = value
        except ValueError as e:
            raise XmlExportError(f"encode text: {e}") from e
        return self._serialize(holder)[len("<t>") : -len("</t>")]

    def _build_comment(self, node: Comment) -> etree._Element:
        # XML comments can't contain "--" or end with "-"
        text = re.sub(r"-(?=-)", "- ", node.value)
        if text.endswith("-"):
            text += " "
        try:
            return etree.Comment(text)
        except ValueError as e:
            raise XmlExportError(f"encode comment: {e}") from e

    def _build_element(self, node: Element) -> etree._Element:
        """Build an lxml element for a node and its subtree."""
        try:
            elem = etree.Element(node.name)
            for key, value in node.ordered_properties(self.settings.attribute_order):
                elem.set(key, value)
        except ValueError as e:
            raise XmlExportError(f"encode start {node.name!r}: {e}") from e

        # Adjacent text pieces are joined with newlines so that re-import
        # splits them back into separate text nodes.
        texts: list[str] = list(node.arguments)
        last: etree._Element | None = None

        for child in node.children:
            if isinstance(child, Text):
                texts.append(child.value)
                continue
            if isinstance(child, Comment):
                if not self.settings.xml.emit_comments:
                    continue
                sub = self._build_comment(child)
            else:
                sub = self._build_element(child)

            self._set_text(elem, last, texts)
            texts = []
            elem.append(sub)
            last = sub

        self._set_text(elem, last, texts)
        return elem

    def _set_text(
        self, elem: etree._Element, last: etree._Element | None, texts: list[str]
    ) -> None:
        """Place character data after the last child, or as leading text."""
        if not texts:
            return
        text = "\n".join(texts)
        try:
            if last is None:
                elem.text = text
            else:
                last.tail = text
        except ValueError as e:
            raise XmlExportError(f"encode text for {elem.tag!r}: {e}") from e

