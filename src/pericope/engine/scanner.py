from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from pericope.core.grammar import ReferenceGrammar
from pericope.core.pericope import Pericope
from pericope.data.loader import BookTable, load_default_table
from pericope.errors import PericopeError


logger = logging.getLogger(__name__)

Segment = Union[str, Pericope]

_TOKEN_RE = re.compile(r"\{\{\s*(\d{7,9}(?:\s+\d{7,9})*)\s*\}\}")


class TextScanner:
    """
    Single pass over ``text`` yielding plain-text runs and pericopes in order.

    Plain runs are never empty. Matches never overlap: after a reference the
    scan resumes right after its last character. To scan again, build a new
    scanner.
    """

    def __init__(self, text: str, grammar: ReferenceGrammar) -> None:
        self.text = text
        self._grammar = grammar
        self._normalized = grammar.normalize(text)
        self._pos = 0
        self._plain_start = 0
        self._pending: Optional[Pericope] = None

    def __iter__(self) -> "TextScanner":
        return self

    def __next__(self) -> Segment:
        if self._pending is not None:
            pericope, self._pending = self._pending, None
            return pericope

        while self._pos < len(self.text):
            match = self._grammar.match(self.text, self._pos, normalized=self._normalized)
            if match is None:
                self._pos += 1
                continue
            plain = self.text[self._plain_start : match.start]
            self._pos = self._plain_start = match.end
            pericope = Pericope.from_match(match)
            if plain:
                self._pending = pericope
                return plain
            return pericope

        if self._plain_start < len(self.text):
            plain = self.text[self._plain_start :]
            self._plain_start = len(self.text)
            return plain
        raise StopIteration


@dataclass(frozen=True)
class Extraction:
    text: str
    pericopes: tuple[Pericope, ...]


def _grammar(table: Optional[BookTable]) -> ReferenceGrammar:
    return ReferenceGrammar(table if table is not None else load_default_table())


def split(text: str, table: Optional[BookTable] = None) -> TextScanner:
    return TextScanner(text, _grammar(table))


def parse_all(text: str, table: Optional[BookTable] = None) -> List[Pericope]:
    return [s for s in split(text, table) if isinstance(s, Pericope)]


def extract(text: str, table: Optional[BookTable] = None) -> Extraction:
    """Remove every reference from ``text``, returning what is left and what was found."""
    plain = []
    pericopes = []
    for s in split(text, table):
        if isinstance(s, Pericope):
            pericopes.append(s)
        else:
            plain.append(s)
    return Extraction(text="".join(plain), pericopes=tuple(pericopes))


def to_token(pericope: Pericope) -> str:
    return "{{" + " ".join(str(verse_id) for verse_id in pericope.to_a()) + "}}"


def sub(text: str, table: Optional[BookTable] = None) -> str:
    """Replace each reference with its ``{{verse_id ...}}`` token."""
    return "".join(to_token(s) if isinstance(s, Pericope) else s for s in split(text, table))


def rsub(text: str, table: Optional[BookTable] = None) -> str:
    """Replace each ``{{verse_id ...}}`` token with the formatted reference."""

    def replace(m: re.Match[str]) -> str:
        ids = [int(x) for x in m.group(1).split()]
        try:
            return Pericope.from_ids(ids, table).to_s()
        except PericopeError as exc:
            logger.warning("Leaving token %r as is: %s", m.group(0), exc)
            return m.group(0)

    return _TOKEN_RE.sub(replace, text)
