"""Errors raised by the conversion pipeline."""


class TabconvertError(Exception):
    """Base error for this package."""


class InvalidStructure(TabconvertError):
    """Raised when a JSON document is not an object or an array of objects."""


class EmptyInput(TabconvertError):
    """Raised when a document yields no records."""


class MalformedInput(TabconvertError):
    """Raised when input bytes cannot be decoded as the declared format."""


class NotADate(TabconvertError):
    """Raised when a string matches none of the accepted date layouts."""


class FetchFailed(TabconvertError):
    """Raised when the source URL cannot be retrieved."""


class UnsupportedFormat(TabconvertError):
    """Raised for an unknown input format or output extension."""
