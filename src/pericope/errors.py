from __future__ import annotations


class PericopeError(ValueError):
    """Base exception for references that cannot be built."""


class PericopeNotFound(PericopeError):
    """Raised when text holds no recognizable reference."""


class MixedBooksError(PericopeError):
    """Raised when verse ids passed to a single pericope span several books."""


class InvalidVerseIdError(PericopeError):
    """Raised when a verse id does not name a verse in the book table."""


class BookTableError(PericopeError):
    """Raised when the book table file is malformed or empty."""
