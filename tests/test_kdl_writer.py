"""Tests for the KDL writer."""

import io

import pytest

from xml_kdl.config import Settings
from xml_kdl.kdl_writer import KdlWriter, escape, identifier, quote
from xml_kdl.nodes import Comment, Document, Element, Text


@pytest.fixture
def writer() -> KdlWriter:
    """Writer with default settings."""
    return KdlWriter(Settings.default())


class TestEscaping:
    """Tests for quoted value rendering."""

    def test_standard_escapes(self) -> None:
        """Backslash, quote, newline, carriage return and tab are escaped."""
        assert escape('a\\b"c\nd\re\tf') == 'a\\\\b\\"c\\nd\\re\\tf'

    def test_control_characters(self) -> None:
        """Other control characters use a 4-digit unicode escape."""
        assert escape("\x01") == "\\u{0001}"
        assert escape("\x1f") == "\\u{001F}"
        assert escape("\x08") == "\\u{0008}"

    def test_plain_text_unchanged(self) -> None:
        """Printable characters, including non-ASCII, pass through."""
        assert escape("Stone axe, très bien") == "Stone axe, très bien"

    def test_quote(self) -> None:
        """quote wraps the escaped value in double quotes."""
        assert quote('say "hi"') == '"say \\"hi\\""'
        assert quote("") == '""'


class TestIdentifier:
    """Tests for node name and key rendering."""

    def test_plain_names_are_bare(self) -> None:
        """Ordinary tag names are written bare."""
        assert identifier("item") == "item"
        assert identifier("parentTransform") == "parentTransform"
        assert identifier("ns:tag.sub-name") == "ns:tag.sub-name"

    def test_reserved_prefix_is_quoted(self) -> None:
        """Names with the reserved prefix are quoted."""
        assert identifier("_text") == '"_text"'
        assert identifier("_custom") == '"_custom"'

    def test_invalid_identifiers_are_quoted(self) -> None:
        """Names KDL can't take bare are quoted."""
        assert identifier("null") == '"null"'
        assert identifier("has space") == '"has space"'
        assert identifier("1st") == '"1st"'
        assert identifier("") == '""'


class TestKdlWriter:
    """Tests for document serialization."""

    def test_sample_document(self, writer: KdlWriter) -> None:
        """The sample tree serializes with inline text and a top comment."""
        document = Document(
            nodes=[
                Comment(" sample comment "),
                Element(
                    "root",
                    properties={"a": "b"},
                    children=[
                        Element("child1", properties={"c": "d"}),
                        Element("child2", children=[Text("some text")]),
                    ],
                ),
            ]
        )

        assert writer.dumps(document) == (
            "//  sample comment\n"
            "\n"
            'root a="b" {\n'
            '  child1 c="d"\n'
            '  child2 "some text"\n'
            "}\n"
        )

    def test_property_order(self, writer: KdlWriter) -> None:
        """Properties follow the canonical order."""
        element = Element(
            "property",
            properties={"zeta": "1", "value": "2", "alpha": "3", "name": "n"},
        )

        assert writer.dumps(Document(nodes=[element])) == (
            'property name="n" value="2" alpha="3" zeta="1"\n'
        )

    def test_output_stable_across_insertion_order(self, writer: KdlWriter) -> None:
        """Output is byte-identical for the same property set."""
        first = Document(nodes=[Element("a", properties={"x": "1", "name": "n", "b": "2"})])
        second = Document(nodes=[Element("a", properties={"b": "2", "x": "1", "name": "n"})])

        assert writer.dumps(first) == writer.dumps(second)
        assert writer.dumps(first) == writer.dumps(first)

    def test_arguments(self, writer: KdlWriter) -> None:
        """Arguments are quoted and precede properties."""
        element = Element("a", arguments=["1", "two"], properties={"k": "v"})

        assert writer.dumps(Document(nodes=[element])) == 'a "1" "two" k="v"\n'

    def test_inline_text_after_properties(self, writer: KdlWriter) -> None:
        """Inline text is the last value on the line."""
        element = Element("a", properties={"k": "v"}, children=[Text("hello")])

        assert writer.dumps(Document(nodes=[element])) == 'a k="v" "hello"\n'

    def test_arguments_keep_text_in_block(self, writer: KdlWriter) -> None:
        """A text child after arguments is written as a _text node."""
        element = Element("n", arguments=["a"], children=[Text("t")])

        assert writer.dumps(Document(nodes=[element])) == (
            'n "a" {\n  "_text" "t"\n}\n'
        )

    def test_text_with_siblings(self, writer: KdlWriter) -> None:
        """Text that isn't the only child is written as a _text node."""
        element = Element("a", children=[Text("x"), Element("b")])

        assert writer.dumps(Document(nodes=[element])) == (
            'a {\n  "_text" "x"\n  b\n}\n'
        )

    def test_top_level_text(self, writer: KdlWriter) -> None:
        """Top-level text is never inlined."""
        assert writer.dumps(Document(nodes=[Text("loose")])) == '"_text" "loose"\n'

    def test_multiline_comment(self, writer: KdlWriter) -> None:
        """Each comment line is written at the node's depth."""
        element = Element(
            "a", children=[Comment("line one\r\n\r\nline three  "), Element("b")]
        )

        assert writer.dumps(Document(nodes=[element])) == (
            "a {\n  // line one\n  //\n  // line three\n  b\n}\n"
        )

    def test_nested_depth(self, writer: KdlWriter) -> None:
        """Nested blocks indent two spaces per level."""
        element = Element("a", children=[Element("b", children=[Element("c")])])

        assert writer.dumps(Document(nodes=[element])) == (
            "a {\n  b {\n    c\n  }\n}\n"
        )

    def test_top_level_separation(self, writer: KdlWriter) -> None:
        """Top-level nodes are separated by a blank line."""
        document = Document(nodes=[Element("a"), Element("b")])

        assert writer.dumps(document) == "a\n\nb\n"

    def test_escaped_values(self, writer: KdlWriter) -> None:
        """Values are escaped in every position."""
        element = Element("a", properties={"k": 'say "x"'}, children=[Text("1\n2")])

        assert writer.dumps(Document(nodes=[element])) == (
            'a k="say \\"x\\"" "1\\n2"\n'
        )

    def test_empty_document(self, writer: KdlWriter) -> None:
        """An empty document writes nothing."""
        assert writer.dumps(Document()) == ""

    def test_custom_indent(self) -> None:
        """Indentation follows the settings."""
        settings = Settings.default()
        settings.kdl.indent = "\t"
        writer = KdlWriter(settings)

        document = Document(nodes=[Element("a", children=[Element("b")])])

        assert writer.dumps(document) == "a {\n\tb\n}\n"

    def test_write_to_stream(self, writer: KdlWriter) -> None:
        """write sends the same text to a stream."""
        document = Document(nodes=[Element("a", properties={"k": "v"})])
        stream = io.StringIO()

        writer.write(document, stream)

        assert stream.getvalue() == writer.dumps(document)
