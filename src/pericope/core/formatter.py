from __future__ import annotations

from typing import Optional, Sequence

from pericope.core.ranges import VerseRange
from pericope.data.loader import Book
from pericope.utils.verse_id import VerseIdCodec


class PericopeFormatter:
    """
    Render merged ranges as display text, e.g. "Philippians 1:1-17, 2:3-5, 17".

    A range covering whole chapters prints bare chapter numbers ("Psalm 1-8").
    Such a range printed right after a verse-level range is joined with "; "
    so the chapter number cannot be read back as a verse.
    """

    def __init__(self, codec: Optional[VerseIdCodec] = None) -> None:
        self.codec = codec or VerseIdCodec()

    def format(self, book: Book, ranges: Sequence[VerseRange]) -> str:
        return f"{book.name} {self.format_ranges(book, ranges)}"

    def format_ranges(self, book: Book, ranges: Sequence[VerseRange]) -> str:
        out = ""
        recent_chapter: Optional[int] = None if book.has_chapters else 1
        for r in ranges:
            lo = self.codec.decode(r.start)
            hi = self.codec.decode(r.end)

            if book.has_chapters and lo.verse == 1 and hi.verse >= book.max_verse(hi.chapter):
                if out:
                    out += "; " if recent_chapter is not None else ", "
                out += str(lo.chapter)
                if hi.chapter > lo.chapter:
                    out += f"-{hi.chapter}"
                recent_chapter = None
                continue

            if out:
                out += ", "
            if recent_chapter == lo.chapter:
                out += str(lo.verse)
            else:
                out += f"{lo.chapter}:{lo.verse}"
            recent_chapter = lo.chapter

            if r.end != r.start:
                if hi.chapter == lo.chapter:
                    out += f"-{hi.verse}"
                else:
                    out += f"-{hi.chapter}:{hi.verse}"
                    recent_chapter = hi.chapter
        return out
