"""Exceptions raised while converting Surefire reports."""

from typing import Optional


class ConversionError(Exception):
    """Base class for all conversion failures."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(ConversionError):
    """Missing input or unusable destination; nothing has been converted."""


class RootUnreadableError(ConversionError):
    """The source root itself cannot be read."""


class EntryUnreadableError(ConversionError):
    """A file or directory below the source root cannot be read."""


class ParseError(ConversionError):
    """The report is not well-formed XML."""


class WriteError(ConversionError):
    """A CSV destination file cannot be created or written."""
