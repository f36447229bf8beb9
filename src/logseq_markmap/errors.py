"""Exceptions raised while rendering a mind-map."""


class MarkmapError(Exception):
    """Base class for render failures that abort the current render."""


class ApiError(MarkmapError, RuntimeError):
    """The Logseq API rejected a request."""


class DialectConversionError(MarkmapError, ValueError):
    """A block could not be converted from the org dialect to markdown."""


class CompilerError(MarkmapError, ValueError):
    """The markdown compiler rejected the assembled document."""
