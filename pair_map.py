"""
pair_map.py — Bidirectional letter-pair substitution table (the "wiring" of a cog).

A PairMap is built from 13 two-letter tokens, e.g.

    "AB CD EF GH IJ KL MN OP QR ST UV WX YZ"

Each token swaps its two letters. Together the tokens must cover A–Z exactly
once, so the map is a fixed-point-free involution: lookup(lookup(x)) == x and
lookup(x) != x for every letter.

Letters travel through the engine as integer indices (A=0 .. Z=25); the
string helpers here convert at the edges.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import re
import string
from dataclasses import dataclass
from typing import Iterator, Tuple

# =========================
# Alphabet
# =========================

ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)   # 26
PAIR_COUNT = ALPHABET_SIZE // 2 # 13

_PATTERN_RE = re.compile(r"[A-Z]{2}(?:\s+[A-Z]{2}){12}")

# =========================
# Exceptions
# =========================

class EnigmaError(Exception):
    """Base class for all cipher errors."""

class FormatError(EnigmaError):
    """Raised when a pairing pattern is malformed or does not cover the alphabet."""

class InvalidSymbolError(EnigmaError):
    """Raised when something other than a Latin letter reaches a substitution lookup."""

# =========================
# Letter <-> index
# =========================

def letter_index(letter: str) -> int:
    """'A'/'a' -> 0 ... 'Z'/'z' -> 25. Anything else raises InvalidSymbolError."""
    if not isinstance(letter, str) or len(letter) != 1:
        raise InvalidSymbolError(f"{letter!r} is not a single letter")
    i = ALPHABET.find(letter.upper()) if letter.isascii() else -1
    if i < 0:
        raise InvalidSymbolError(f"{letter!r} is not an alphabet letter")
    return i

def index_letter(index: int) -> str:
    if not isinstance(index, int) or not 0 <= index < ALPHABET_SIZE:
        raise InvalidSymbolError(f"{index!r} is not a letter index (0..25)")
    return ALPHABET[index]

# =========================
# PairMap
# =========================

@dataclass(frozen=True)
class PairMap:
    """
    Immutable substitution table. `table[i]` is the partner index of letter i.
    Use PairMap.build(pattern) rather than the constructor.
    """
    table: Tuple[int, ...]
    pairs: Tuple[str, ...]

    @classmethod
    def build(cls, pattern: str) -> "PairMap":
        if not isinstance(pattern, str):
            raise FormatError("pairing pattern must be a string")
        norm = pattern.strip().upper()
        if not _PATTERN_RE.fullmatch(norm):
            raise FormatError(
                f"invalid pairing pattern {pattern!r}: "
                f"expected {PAIR_COUNT} two-letter tokens separated by spaces"
            )
        tokens = tuple(norm.split())

        table = [-1] * ALPHABET_SIZE
        for tok in tokens:
            a, b = ALPHABET.index(tok[0]), ALPHABET.index(tok[1])
            if a == b:
                raise FormatError(f"letter {tok[0]} is paired with itself")
            for i in (a, b):
                if table[i] != -1:
                    raise FormatError(f"letter {ALPHABET[i]} appears in more than one pair")
            table[a], table[b] = b, a

        # 13 tokens with no repeats always cover all 26 letters; kept as a guard
        missing = [ALPHABET[i] for i, v in enumerate(table) if v == -1]
        if missing:
            raise FormatError(f"letters not covered by any pair: {''.join(missing)}")
        return cls(table=tuple(table), pairs=tokens)

    @property
    def pattern(self) -> str:
        return " ".join(self.pairs)

    def lookup_index(self, index: int) -> int:
        if not isinstance(index, int) or not 0 <= index < ALPHABET_SIZE:
            raise InvalidSymbolError(f"{index!r} is not a letter index (0..25)")
        return self.table[index]

    def lookup(self, letter: str) -> str:
        """Partner of `letter` (case-insensitive), always returned uppercase."""
        return ALPHABET[self.table[letter_index(letter)]]

    def __len__(self) -> int:
        return ALPHABET_SIZE

    def __contains__(self, letter: object) -> bool:
        return isinstance(letter, str) and len(letter) == 1 and letter.upper() in ALPHABET

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for tok in self.pairs:
            yield tok[0], tok[1]
