"""Exceptions raised by the converter."""


class ConversionError(ValueError):
    """Base class for all conversion failures."""


class XmlDecodeError(ConversionError):
    """The XML input is malformed or uses an unsupported encoding."""


class NotationParseError(ConversionError):
    """The KDL parser rejected the input."""


class XmlExportError(ConversionError):
    """The node tree cannot be expressed as XML."""


class UnsupportedFormatError(ConversionError):
    """The file extension maps to no known format."""
