from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import yaml

from pericope.errors import BookTableError


logger = logging.getLogger(__name__)

DEFAULT_BOOKS_PATH = Path(__file__).with_name("books.yaml")

ORDINALS: dict[int, tuple[str, ...]] = {
    1: ("1", "i", "first", "1st"),
    2: ("2", "ii", "second", "2nd"),
    3: ("3", "iii", "third", "3rd"),
}

_WS_RE = re.compile(r"\s+")


def _compact(name: str) -> str:
    return _WS_RE.sub("", name).casefold()


@dataclass(frozen=True)
class Book:
    index: int
    name: str
    aliases: tuple[str, ...]
    chapter_verse_counts: tuple[int, ...]

    @property
    def chapter_count(self) -> int:
        return len(self.chapter_verse_counts)

    @property
    def has_chapters(self) -> bool:
        return self.chapter_count > 1

    @property
    def is_numbered(self) -> bool:
        return self.name[:1].isdigit()

    def to_valid_chapter(self, chapter: int) -> int:
        return min(max(chapter, 1), self.chapter_count)

    def max_verse(self, chapter: int) -> int:
        """Last verse of ``chapter``, clamping the chapter into the book first."""
        return self.chapter_verse_counts[self.to_valid_chapter(chapter) - 1]

    def to_valid_verse(self, chapter: int, verse: int) -> int:
        return min(max(verse, 1), self.max_verse(chapter))


class BookTable:
    """Ordered books plus the alias pattern used to find them in text."""

    def __init__(self, books: list[Book]) -> None:
        self.books = sorted(books, key=lambda b: b.index)
        self._by_index: dict[int, Book] = {b.index: b for b in self.books}
        self._by_alias: dict[str, Book] = {}
        sources: dict[str, int] = {}
        # Plain names are registered before ordinal forms so "isa" stays
        # Isaiah rather than "i sa" (1 Samuel).
        for numbered in (False, True):
            for b in self.books:
                if b.is_numbered != numbered:
                    continue
                for alias in (b.name, *b.aliases):
                    key = _compact(alias)
                    owner = self._by_alias.setdefault(key, b)
                    if owner is not b:
                        logger.debug("Alias %r already belongs to %s; ignored for %s", alias, owner.name, b.name)
                        continue
                    # A space in an alias matches any whitespace, including none.
                    source = r"\s*".join(re.escape(word) for word in alias.casefold().split())
                    sources[source] = len(key)
        # Longest first so "philemon" is tried before "phil".
        alternatives = sorted(sources, key=lambda s: (-sources[s], s))
        self._pattern = re.compile(
            r"(?<!\w)(?:" + "|".join(alternatives) + r")(?![^\W\d_])",
            re.IGNORECASE,
        )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "BookTable":
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise BookTableError(f"Cannot read book table {path}: {exc}") from exc
        table = cls.from_dict(data)
        logger.debug("Loaded %d books from %s", len(table), path)
        return table

    @classmethod
    def from_dict(cls, data: Any) -> "BookTable":
        if not isinstance(data, dict) or not isinstance(data.get("books"), list):
            raise BookTableError("Book table must be a mapping with a 'books' list")
        books = []
        seen: set[int] = set()
        for position, entry in enumerate(data["books"]):
            book = _book_from_entry(entry, position)
            if book is None:
                continue
            if book.index in seen:
                logger.warning("Skipping duplicate book index %s (%s)", book.index, book.name)
                continue
            seen.add(book.index)
            books.append(book)
        if not books:
            raise BookTableError("No valid books found in book table")
        return cls(books)

    def __len__(self) -> int:
        return len(self.books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.books)

    def book(self, index: int) -> Book:
        if index in self._by_index:
            return self._by_index[index]
        raise KeyError(f"Unknown book index: {index!r}")

    def book_by_name(self, book_name: str) -> Book:
        key = _compact(book_name.strip().rstrip("."))
        if key in self._by_alias:
            return self._by_alias[key]
        raise KeyError(f"Unknown book name: {book_name!r}")

    def resolve(self, book: Union[int, str, Book]) -> Book:
        if isinstance(book, Book):
            return book
        if isinstance(book, int):
            return self.book(book)
        return self.book_by_name(book)

    def match_book(self, text: str, pos: int = 0) -> Optional[tuple[Book, int]]:
        """Match a book name starting exactly at ``pos``; return the book and end offset."""
        m = self._pattern.match(text, pos)
        if m is None:
            return None
        book = self._by_alias.get(_compact(m.group(0)))
        if book is None:
            return None
        return book, m.end()


def _book_from_entry(entry: Any, position: int) -> Optional[Book]:
    if not isinstance(entry, dict):
        logger.warning("Skipping malformed book entry at position %s: %r", position, entry)
        return None
    index = entry.get("index")
    name = entry.get("name")
    verses = entry.get("verses")
    if not isinstance(index, int) or not 1 <= index <= 999:
        logger.warning("Skipping book entry at position %s: invalid index %r", position, index)
        return None
    if not isinstance(name, str) or not name.strip():
        logger.warning("Skipping book %s: invalid name %r", index, name)
        return None
    if not isinstance(verses, list) or not verses or len(verses) >= 1000:
        logger.warning("Skipping %s: verses must be a non-empty list of at most 999 chapters", name)
        return None
    if any(not isinstance(v, int) or isinstance(v, bool) or not 1 <= v <= 999 for v in verses):
        logger.warning("Skipping %s: verse counts must be integers in 1..999", name)
        return None

    stems = [str(a).strip().casefold() for a in entry.get("aliases") or [] if str(a).strip()]
    ordinal = entry.get("ordinal")
    if ordinal is not None:
        if ordinal not in ORDINALS:
            logger.warning("Skipping %s: unsupported ordinal %r", name, ordinal)
            return None
        aliases = tuple(f"{prefix} {stem}" for prefix in ORDINALS[ordinal] for stem in stems)
    else:
        aliases = tuple(stems)
    return Book(index=index, name=name.strip(), aliases=aliases, chapter_verse_counts=tuple(verses))


@lru_cache(maxsize=None)
def load_default_table() -> BookTable:
    return BookTable.from_path(DEFAULT_BOOKS_PATH)
