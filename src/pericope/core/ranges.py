from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence

from pericope.core.grammar import RawLocator, RawSegment, NEW_REFERENCE
from pericope.data.loader import Book
from pericope.errors import InvalidVerseIdError, MixedBooksError, PericopeError
from pericope.utils.verse_id import VerseIdCodec


logger = logging.getLogger(__name__)

_CODEC = VerseIdCodec()


@dataclass(frozen=True)
class VerseRange:
    """Inclusive span of verse ids within one book."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"range start {self.start} is after its end {self.end}")

    def __contains__(self, verse_id: object) -> bool:
        return isinstance(verse_id, int) and self.start <= verse_id <= self.end

    def overlaps(self, other: "VerseRange") -> bool:
        return self.start <= other.end and other.start <= self.end

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


def successor(book: Book, verse_id: int) -> int:
    """The verse id that follows ``verse_id`` in reading order, rolling over chapters."""
    coord = _CODEC.decode(verse_id)
    if coord.verse < book.max_verse(coord.chapter) or coord.chapter >= book.chapter_count:
        return verse_id + 1
    return _CODEC.encode(book.index, coord.chapter + 1, 1)


def merge_ranges(book: Book, ranges: Iterable[VerseRange]) -> tuple[VerseRange, ...]:
    """Sort and merge ranges that overlap or touch, including across a chapter break."""
    merged: List[VerseRange] = []
    for r in sorted(ranges, key=lambda r: (r.start, r.end)):
        if merged and r.start <= successor(book, merged[-1].end):
            last = merged[-1]
            merged[-1] = VerseRange(last.start, max(last.end, r.end))
        else:
            merged.append(r)
    return tuple(merged)


def iter_verse_ids(book: Book, ranges: Iterable[VerseRange]) -> Iterator[int]:
    for r in ranges:
        verse_id = r.start
        while verse_id <= r.end:
            yield verse_id
            verse_id = successor(book, verse_id)


def ranges_intersect(a: Sequence[VerseRange], b: Sequence[VerseRange]) -> bool:
    return any(x.overlaps(y) for x in a for y in b)


def ranges_from_ids(book: Book, verse_ids: Iterable[int]) -> tuple[VerseRange, ...]:
    """Run-length encode verse ids (any order, duplicates allowed) of ``book``."""
    ids = sorted(set(verse_ids))
    if not ids:
        raise PericopeError("Cannot build a pericope from an empty list of verse ids")
    for verse_id in ids:
        book_index = _CODEC.book_index(verse_id)
        if book_index != book.index:
            raise MixedBooksError(f"Verse id {verse_id} is not in {book.name} (book {book.index})")
        try:
            coord = _CODEC.decode(verse_id)
        except ValueError as exc:
            raise InvalidVerseIdError(str(exc)) from exc
        if coord.chapter > book.chapter_count or coord.verse > book.max_verse(coord.chapter):
            raise InvalidVerseIdError(f"{book.name} has no verse {coord} (id {verse_id})")
    return merge_ranges(book, (VerseRange(i, i) for i in ids))


class RangeBuilder:
    """Turns the raw segments of one reference into coerced, merged verse ranges."""

    def __init__(self, codec: Optional[VerseIdCodec] = None) -> None:
        self.codec = codec or _CODEC

    def _chapter(self, book: Book, chapter: int) -> int:
        valid = book.to_valid_chapter(chapter)
        if valid != chapter:
            logger.debug("Coerced %s chapter %d to %d", book.name, chapter, valid)
        return valid

    def _verse(self, book: Book, chapter: int, verse: int) -> int:
        valid = book.to_valid_verse(chapter, verse)
        if valid != verse:
            logger.debug("Coerced %s %d:%d to %d:%d", book.name, chapter, verse, chapter, valid)
        return valid

    def build(self, book: Book, segments: Sequence[RawSegment]) -> tuple[VerseRange, ...]:
        return self.build_checked(book, segments)[0]

    def build_checked(self, book: Book, segments: Sequence[RawSegment]) -> tuple[tuple[VerseRange, ...], bool]:
        """
        Like ``build``, also reporting whether any segment was an inverted
        range whose end had to be dropped.
        """
        inverted = False
        # Chapter that a bare number continues, e.g. 12 while reading the 8 of "12:1-8".
        recent_chapter: Optional[int] = None if book.has_chapters else 1
        ranges = []
        for segment in segments:
            if segment.separator == NEW_REFERENCE and book.has_chapters:
                recent_chapter = None
            built, dropped_end = self._build_range(book, segment, recent_chapter)
            ranges.append(built)
            inverted = inverted or dropped_end
            lower = segment.lower
            if lower.is_pair or recent_chapter is not None:
                recent_chapter = _CODEC.decode(ranges[-1].end).chapter
        return merge_ranges(book, ranges), inverted

    def _build_range(
        self, book: Book, segment: RawSegment, recent_chapter: Optional[int]
    ) -> tuple[VerseRange, bool]:
        lower: RawLocator = segment.lower
        upper: RawLocator = segment.upper or segment.lower
        dropped_end = False

        # "Psalm 4-1" reads as "Psalm 4".
        if not lower.is_pair and not upper.is_pair and upper.first < lower.first:
            logger.debug("Dropping inverted end %d of %s %d-%d", upper.first, book.name, lower.first, upper.first)
            upper = lower
            dropped_end = True

        chapter_range = False
        if lower.is_pair:
            start_chapter = self._chapter(book, lower.first)
            start_verse = lower.second
        elif recent_chapter is not None:
            start_chapter, start_verse = recent_chapter, lower.first
        else:
            start_chapter, start_verse = self._chapter(book, lower.first), 1
            chapter_range = True
        start_verse = self._verse(book, start_chapter, start_verse)

        if upper.is_pair:
            end_chapter = self._chapter(book, upper.first)
            end_verse = upper.second
        elif chapter_range:
            end_chapter = self._chapter(book, upper.first)
            end_verse = book.max_verse(end_chapter)
        else:
            end_chapter, end_verse = start_chapter, upper.first
        end_verse = self._verse(book, end_chapter, end_verse)

        start = self.codec.encode(book.index, start_chapter, start_verse)
        end = self.codec.encode(book.index, end_chapter, end_verse)
        if end < start:
            logger.debug("Dropping inverted end of %s %d:%d-%d:%d", book.name, start_chapter, start_verse, end_chapter, end_verse)
            end = start
            dropped_end = True
        return VerseRange(start, end), dropped_end
