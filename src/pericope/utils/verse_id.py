from __future__ import annotations

from dataclasses import dataclass


BOOK_FACTOR = 1_000_000
CHAPTER_FACTOR = 1_000


@dataclass(frozen=True, order=True)
class VerseCoord:
    book_index: int
    chapter: int
    verse: int

    def __str__(self) -> str:
        return f"{self.chapter}:{self.verse}"


class VerseIdCodec:
    """
    Canonical ID encoding:
      id = (book_index * 1_000_000) + (chapter * 1_000) + verse

    Ids sort in reading order: book, then chapter, then verse.
    """

    def encode(self, book_index: int, chapter: int, verse: int) -> int:
        if book_index <= 0:
            raise ValueError("book_index must be >= 1")
        if chapter <= 0 or verse <= 0:
            raise ValueError("chapter and verse must be >= 1")
        if chapter >= 1000 or verse >= 1000:
            raise ValueError("chapter and verse must be < 1000")
        return (book_index * BOOK_FACTOR) + (chapter * CHAPTER_FACTOR) + verse

    def decode(self, verse_id: int) -> VerseCoord:
        if verse_id <= 0:
            raise ValueError("verse_id must be positive")
        book_index, rem = divmod(verse_id, BOOK_FACTOR)
        chapter, verse = divmod(rem, CHAPTER_FACTOR)
        if book_index == 0 or chapter == 0 or verse == 0:
            raise ValueError(f"verse_id {verse_id} does not encode a book, chapter and verse")
        return VerseCoord(book_index=book_index, chapter=chapter, verse=verse)

    def book_index(self, verse_id: int) -> int:
        return verse_id // BOOK_FACTOR
