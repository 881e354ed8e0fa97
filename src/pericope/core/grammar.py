from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from pericope.core.normalizer import Normalizer
from pericope.data.loader import Book, BookTable


_DIGITS = "0123456789"
DASH = "-"
CONTINUE = ","
NEW_REFERENCE = ";"


@dataclass(frozen=True)
class GrammarConfig:
    # Any of these between two numbers reads as chapter:verse (after normalization).
    pair_separators: str = ':."'
    # Part-of-verse markers that may trail a number ("6a", "9b"); they are dropped.
    verse_suffixes: str = "abc"
    # Numbers with more significant digits read as the largest value that fits.
    max_digits: int = 3
    # Treat "jn 3 16" like "jn 3:16".
    whitespace_pairs: bool = True


@dataclass(frozen=True)
class RawLocator:
    """One number, or a chapter/verse pair, exactly as written."""

    first: int
    second: Optional[int] = None

    @property
    def is_pair(self) -> bool:
        return self.second is not None


@dataclass(frozen=True)
class RawSegment:
    lower: RawLocator
    upper: Optional[RawLocator] = None
    # The list separator that preceded this segment, if any.
    separator: Optional[str] = None


@dataclass(frozen=True)
class ReferenceMatch:
    book: Book
    segments: tuple[RawSegment, ...]
    start: int
    end: int
    text: str


class _ReferenceReader:
    """
    Cursor over normalized text.

    Each ``read_*`` method either consumes a complete production and returns
    it, or returns None with the cursor where it started.
    """

    def __init__(
        self,
        text: str,
        pos: int,
        cfg: GrammarConfig,
        book_at: Callable[[int], bool],
    ) -> None:
        self.text = text
        self.pos = pos
        self.cfg = cfg
        self._book_at = book_at

    def at(self, chars: str) -> bool:
        return self.pos < len(self.text) and self.text[self.pos] in chars

    def _letter_at(self, i: int) -> bool:
        return i < len(self.text) and self.text[i].isalpha()

    def skip_ws(self) -> bool:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        return self.pos > start

    def read_number(self) -> Optional[int]:
        end = self.pos
        while end < len(self.text) and self.text[end] in _DIGITS:
            end += 1
        if end == self.pos:
            return None
        # Longer numbers saturate; coercion clamps them into the book.
        significant = self.text[self.pos : end].lstrip("0")
        if len(significant) > self.cfg.max_digits:
            value = 10 ** self.cfg.max_digits - 1
        else:
            value = int(significant or "0")
        if self._letter_at(end) and self.text[end].lower() in self.cfg.verse_suffixes and not self._letter_at(end + 1):
            end += 1
        if self._letter_at(end):
            return None
        self.pos = end
        return value

    def read_locator(self) -> Optional[RawLocator]:
        first = self.read_number()
        if first is None:
            return None
        mark = self.pos
        spaced = self.skip_ws()
        if self.at(self.cfg.pair_separators):
            self.pos += 1
            self.skip_ws()
        elif not (spaced and self.cfg.whitespace_pairs) or self._book_at(self.pos):
            self.pos = mark
            return RawLocator(first)
        second = self.read_number()
        if second is None:
            self.pos = mark
            return RawLocator(first)
        return RawLocator(first, second)

    def read_segment(self, separator: Optional[str] = None) -> Optional[RawSegment]:
        lower = self.read_locator()
        if lower is None:
            return None
        mark = self.pos
        self.skip_ws()
        if self.at(DASH):
            self.pos += 1
            self.skip_ws()
            upper = None if self._book_at(self.pos) else self.read_locator()
            if upper is not None:
                return RawSegment(lower, upper, separator)
        self.pos = mark
        return RawSegment(lower, None, separator)

    def read_reference(self) -> List[RawSegment]:
        first = self.read_segment()
        if first is None:
            return []
        segments = [first]
        while True:
            mark = self.pos
            self.skip_ws()
            if not self.at(CONTINUE + NEW_REFERENCE):
                self.pos = mark
                break
            separator = self.text[self.pos]
            self.pos += 1
            self.skip_ws()
            # ", 1 Cor 2" starts the next reference, not a verse.
            segment = None if self._book_at(self.pos) else self.read_segment(separator)
            if segment is None:
                self.pos = mark
                break
            segments.append(segment)
        return segments


class ReferenceGrammar:
    """Recognizes "<book>[.] <chapter/verse list>" at a given text position."""

    def __init__(
        self,
        table: BookTable,
        cfg: Optional[GrammarConfig] = None,
        normalizer: Optional[Normalizer] = None,
    ) -> None:
        self.table = table
        self.cfg = cfg or GrammarConfig()
        self.normalizer = normalizer or Normalizer()

    def normalize(self, text: str) -> str:
        return self.normalizer.normalize(text)

    def match(self, text: str, pos: int = 0, normalized: Optional[str] = None) -> Optional[ReferenceMatch]:
        """
        Match a reference that starts exactly at ``pos``.

        ``normalized`` may carry ``normalize(text)`` when the caller scans many
        positions of the same text.
        """
        if normalized is None:
            normalized = self.normalize(text)
        found = self.table.match_book(normalized, pos)
        if found is None:
            return None
        book, end = found

        def book_at(i: int) -> bool:
            return self.table.match_book(normalized, i) is not None

        reader = _ReferenceReader(normalized, end, self.cfg, book_at)
        if reader.at("."):
            reader.pos += 1
        reader.skip_ws()
        segments = reader.read_reference()
        if not segments:
            return None
        return ReferenceMatch(
            book=book,
            segments=tuple(segments),
            start=pos,
            end=reader.pos,
            text=text[pos : reader.pos],
        )

    def search(self, text: str, pos: int = 0, normalized: Optional[str] = None) -> Optional[ReferenceMatch]:
        """First reference at or after ``pos``."""
        if normalized is None:
            normalized = self.normalize(text)
        for i in range(pos, len(text)):
            m = self.match(text, i, normalized=normalized)
            if m is not None:
                return m
        return None
