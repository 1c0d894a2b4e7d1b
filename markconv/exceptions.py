"""Exceptions raised by markconv.

The text converters themselves never raise for string input; these cover the
file-level helpers and caller-supplied tag mappings.
"""


class MarkconvError(Exception):
    """Base class for all markconv errors."""


class ConversionError(MarkconvError):
    """A file-level conversion could not be started (missing input, bad format)."""


class MappingError(MarkconvError):
    """A tag-mapping record is invalid."""
