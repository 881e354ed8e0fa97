"""Find, normalize and format Bible references in free text."""

from pericope.core.grammar import GrammarConfig, ReferenceGrammar
from pericope.core.pericope import Pericope
from pericope.core.ranges import VerseRange
from pericope.data.loader import Book, BookTable, load_default_table
from pericope.engine.scanner import Extraction, TextScanner, extract, parse_all, rsub, split, sub
from pericope.errors import (
    BookTableError,
    InvalidVerseIdError,
    MixedBooksError,
    PericopeError,
    PericopeNotFound,
)

__version__ = "0.1.0"

__all__ = [
    "Book",
    "BookTable",
    "BookTableError",
    "Extraction",
    "GrammarConfig",
    "InvalidVerseIdError",
    "MixedBooksError",
    "Pericope",
    "PericopeError",
    "PericopeNotFound",
    "ReferenceGrammar",
    "TextScanner",
    "VerseRange",
    "extract",
    "load_default_table",
    "parse_all",
    "rsub",
    "split",
    "sub",
]
