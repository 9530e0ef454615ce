"""XML to KDL converter.

A Python library and CLI tool for converting game-data XML files to KDL
and back, keeping elements, attributes, text, and comments.
"""

from xml_kdl.config import Settings
from xml_kdl.nodes import Comment, Document, Element, Node, Text
from xml_kdl.xml_importer import XmlImporter, parse_fragment
from xml_kdl.kdl_reader import KdlReader
from xml_kdl.kdl_writer import KdlWriter
from xml_kdl.xml_writer import XmlWriter
from xml_kdl.converter import ConversionResult, Converter
from xml_kdl.batch import BatchConverter, BatchResult

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "Document",
    "Element",
    "Text",
    "Comment",
    "Node",
    "XmlImporter",
    "parse_fragment",
    "KdlReader",
    "KdlWriter",
    "XmlWriter",
    "Converter",
    "ConversionResult",
    "BatchConverter",
    "BatchResult",
]
