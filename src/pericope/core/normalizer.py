from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


_DASHES = {
    "\u2010": "-",  # hyphen
    "\u2011": "-",  # non-breaking hyphen
    "\u2012": "-",  # figure dash
    "\u2013": "-",  # en dash
    "\u2014": "-",  # em dash
    "\u2015": "-",  # horizontal bar
    "\u2212": "-",  # minus sign
}

_DOUBLE_QUOTES = {
    "\u201c": '"',
    "\u201d": '"',
    "\u201e": '"',
    "\u201f": '"',
    "\u2033": '"',  # double prime
    "\uff02": '"',
}


@dataclass(frozen=True)
class NormalizationConfig:
    standardize_dashes: bool = True
    standardize_quotes: bool = True


class Normalizer:
    """
    Map typographic variants onto the ASCII punctuation the grammar reads.

    Every replacement is one character for one character, so offsets into the
    normalized text are offsets into the original.
    """

    def __init__(self, cfg: Optional[NormalizationConfig] = None) -> None:
        self.cfg = cfg or NormalizationConfig()
        mapping: dict[str, str] = {}
        if self.cfg.standardize_dashes:
            mapping.update(_DASHES)
        if self.cfg.standardize_quotes:
            mapping.update(_DOUBLE_QUOTES)
        self._table = str.maketrans(mapping)

    def normalize(self, text: str) -> str:
        return text.translate(self._table)
