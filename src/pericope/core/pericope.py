from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Union

from pericope.core.formatter import PericopeFormatter
from pericope.core.grammar import ReferenceGrammar, ReferenceMatch
from pericope.core.ranges import (
    RangeBuilder,
    VerseRange,
    iter_verse_ids,
    ranges_from_ids,
    ranges_intersect,
)
from pericope.data.loader import Book, BookTable, load_default_table
from pericope.errors import InvalidVerseIdError, PericopeError, PericopeNotFound
from pericope.utils.verse_id import VerseIdCodec

if TYPE_CHECKING:
    from pericope.engine.scanner import Extraction, TextScanner


_BUILDER = RangeBuilder()
_FORMATTER = PericopeFormatter()


def _table(table: Optional[BookTable]) -> BookTable:
    return table if table is not None else load_default_table()


@dataclass(frozen=True, repr=False)
class Pericope:
    """
    One scripture reference: a book plus sorted, merged verse ranges.

    Build one with ``Pericope.parse("jn 3:16")`` or
    ``Pericope.from_ids([43003016])``. Instances are immutable values; two
    pericopes are equal when they name the same verses.
    """

    book: Book
    ranges: tuple[VerseRange, ...]
    original_string: str = field(default="", compare=False)
    # Set when the source text held an inverted range ("mark 3-1"); such a
    # pericope never intersects anything, itself included.
    invalid: bool = field(default=False, compare=False)

    @classmethod
    def parse(cls, text: str, table: Optional[BookTable] = None) -> "Pericope":
        """The first reference found in ``text``."""
        match = ReferenceGrammar(_table(table)).search(text)
        if match is None:
            raise PericopeNotFound(f"No pericope found in {text!r}")
        return cls.from_match(match)

    @classmethod
    def from_match(cls, match: ReferenceMatch) -> "Pericope":
        ranges, inverted = _BUILDER.build_checked(match.book, match.segments)
        return cls(
            book=match.book,
            ranges=ranges,
            original_string=match.text,
            invalid=inverted,
        )

    @classmethod
    def from_ids(cls, verse_ids: Iterable[int], table: Optional[BookTable] = None) -> "Pericope":
        ids = list(verse_ids)
        if not ids:
            raise PericopeError("Cannot build a pericope from an empty list of verse ids")
        book_index = VerseIdCodec().book_index(min(ids))
        try:
            book = _table(table).book(book_index)
        except KeyError as exc:
            raise InvalidVerseIdError(f"Verse id {min(ids)} names unknown book {book_index}") from exc
        return cls(book=book, ranges=ranges_from_ids(book, ids))

    # Book queries ---------------------------------------------------------

    @property
    def book_name(self) -> str:
        return self.book.name

    @property
    def book_chapter_count(self) -> int:
        return self.book.chapter_count

    @property
    def book_has_chapters(self) -> bool:
        return self.book.has_chapters

    @staticmethod
    def get_max_verse(book: Union[int, str, Book], chapter: int, table: Optional[BookTable] = None) -> int:
        """Last verse of ``chapter``; out-of-range chapters are clamped first."""
        return _table(table).resolve(book).max_verse(chapter)

    @staticmethod
    def get_max_chapter(book: Union[int, str, Book], table: Optional[BookTable] = None) -> int:
        return _table(table).resolve(book).chapter_count

    # Reading --------------------------------------------------------------

    def __iter__(self) -> Iterator[int]:
        return iter_verse_ids(self.book, self.ranges)

    def to_a(self) -> List[int]:
        return list(self)

    def to_s(self) -> str:
        return _FORMATTER.format(self.book, self.ranges)

    def __str__(self) -> str:
        return self.to_s()

    def __repr__(self) -> str:
        return f"Pericope({self.to_s()!r})"

    def intersects(self, other: object) -> bool:
        if not isinstance(other, Pericope) or other.book.index != self.book.index:
            return False
        if self.invalid or other.invalid:
            return False
        return ranges_intersect(self.ranges, other.ranges)

    # Text scanning --------------------------------------------------------

    @staticmethod
    def split(text: str, table: Optional[BookTable] = None) -> "TextScanner":
        from pericope.engine.scanner import split

        return split(text, table)

    @staticmethod
    def sub(text: str, table: Optional[BookTable] = None) -> str:
        from pericope.engine.scanner import sub

        return sub(text, table)

    @staticmethod
    def rsub(text: str, table: Optional[BookTable] = None) -> str:
        from pericope.engine.scanner import rsub

        return rsub(text, table)

    @staticmethod
    def parse_all(text: str, table: Optional[BookTable] = None) -> List["Pericope"]:
        from pericope.engine.scanner import parse_all

        return parse_all(text, table)

    @staticmethod
    def extract(text: str, table: Optional[BookTable] = None) -> "Extraction":
        from pericope.engine.scanner import extract

        return extract(text, table)
