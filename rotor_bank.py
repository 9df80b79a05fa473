"""
rotor_bank.py — The three cogs and the reflector, plus rotor-relative substitution.

Wiring is fixed (as on a real machine the cogs could not be rewired), so the
standard tables are module constants built once into PairMaps. A RotorBank can
still be built from other patterns, which is what the tests do.

Substitution through cog r at setting s:
  forward:   x -> P_r[(x + s) mod 26]      (turn the cog, then follow its wire)
  backward:  y -> (P_r[y] - s) mod 26      (follow the wire, then undo the turn)

Because each P_r is an involution, backward() is the exact inverse of
forward(). The reflector has no offset.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence, Tuple

from pair_map import ALPHABET_SIZE, FormatError, PairMap

# =========================
# Standard wiring
# =========================

ROTOR_PATTERNS: Tuple[str, str, str] = (
    "AK CN EZ VH IJ BL MD SR QP OT UG WX YF",  # cog 1
    "AC EG IJ KM OQ SU WY XZ TV PR LN HF DB",  # cog 2
    "AN BO CP DQ ER FS GT HU IV JW KX LY MZ",  # cog 3
)

REFLECTOR_PATTERN = "AB CD EF GH IJ KL MN OP QR ST UV WX YZ"

ROTOR_COUNT = 3

# =========================
# RotorBank
# =========================

@dataclass(frozen=True)
class RotorBank:
    rotors: Tuple[PairMap, PairMap, PairMap]
    reflector: PairMap

    def __post_init__(self):
        if len(self.rotors) != ROTOR_COUNT:
            raise FormatError(f"a rotor bank needs exactly {ROTOR_COUNT} rotors, got {len(self.rotors)}")

    @classmethod
    def from_patterns(cls, rotor_patterns: Sequence[str], reflector_pattern: str) -> "RotorBank":
        rotor_patterns = tuple(rotor_patterns)
        if len(rotor_patterns) != ROTOR_COUNT:
            raise FormatError(f"expected {ROTOR_COUNT} rotor patterns, got {len(rotor_patterns)}")
        return cls(
            rotors=tuple(PairMap.build(p) for p in rotor_patterns),
            reflector=PairMap.build(reflector_pattern),
        )

    def forward(self, rotor: int, index: int, setting: int) -> int:
        return self.rotors[rotor].lookup_index((index + setting) % ALPHABET_SIZE)

    def backward(self, rotor: int, index: int, setting: int) -> int:
        return (self.rotors[rotor].lookup_index(index) - setting) % ALPHABET_SIZE

    def reflect(self, index: int) -> int:
        return self.reflector.lookup_index(index)


@lru_cache(maxsize=None)
def standard_bank() -> RotorBank:
    """Process-wide bank built from ROTOR_PATTERNS / REFLECTOR_PATTERN."""
    return RotorBank.from_patterns(ROTOR_PATTERNS, REFLECTOR_PATTERN)
