"""In-memory node tree shared by every reader and writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

COMMENT_NODE_NAME = "_comment"
TEXT_NODE_NAME = "_text"
RESERVED_PREFIX = "_"

# Well-known attributes written first, in this order, by both writers.
CANONICAL_ATTRIBUTE_ORDER = [
    "name",
    "trigger",
    "progression_name",
    "action",
    "cvar",
    "operation",
    "level",
    "value",
    "param1",
    "tier",
    "tags",
    "match_all_tags",
    "part",
    "active",
    "prefab",
    "parentTransform",
    "localPos",
]


@dataclass
class Text:
    """A run of character data."""

    value: str


@dataclass
class Comment:
    """A comment, either an XML comment or a `//` annotation line."""

    value: str


@dataclass
class Element:
    """A markup element with its attributes and ordered children."""

    name: str
    arguments: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)

    def ordered_properties(
        self, priority: list[str] | None = None
    ) -> list[tuple[str, str]]:
        """Return properties in canonical order.

        Keys from the priority list come first, in list order; the rest
        follow sorted lexicographically.
        """
        if priority is None:
            priority = CANONICAL_ATTRIBUTE_ORDER

        keys = [key for key in priority if key in self.properties]
        seen = set(keys)
        keys.extend(sorted(key for key in self.properties if key not in seen))
        return [(key, self.properties[key]) for key in keys]

    @property
    def inline_text(self) -> Text | None:
        """The sole Text child, if that is all the element contains.

        Elements with arguments have none: a trailing value after arguments
        would read back as one more argument.
        """
        if self.arguments:
            return None
        if len(self.children) == 1 and isinstance(self.children[0], Text):
            return self.children[0]
        return None


Node = Union[Element, Text, Comment]


@dataclass
class Document:
    """Ordered top-level nodes of a converted file."""

    nodes: list[Node] = field(default_factory=list)

    def walk(self) -> Iterator[Node]:
        """Iterate all nodes in document order (depth-first)."""

        def walk_node(node: Node) -> Iterator[Node]:
            yield node
            if isinstance(node, Element):
                for child in node.children:
                    yield from walk_node(child)

        for node in self.nodes:
            yield from walk_node(node)

    @property
    def node_count(self) -> int:
        """Total number of nodes at every depth."""
        return sum(1 for _ in self.walk())
