"""
enigma_engine.py — Self-reciprocal three-cog rotor cipher.

The engine is stateless between calls: the three cog settings passed to
convert() are copied into a local tuple and stepped letter by letter, so the
same engine may be shared freely (threads, process pools).

Per letter:
  1) forward through cog 1, 2, 3, each turned by its current setting
  2) through the reflector
  3) backward through cog 3, 2, 1, each undoing its setting
  4) step the cogs (odometer carry)

Since the forward path is undone exactly on the way back, the whole transform
is the reflector conjugated by the cogs: applying convert() twice with the same
settings returns the (normalized) input, and no letter ever encrypts to itself.

Normalization
-------------
Input is uppercased and everything outside A–Z is dropped before conversion.
Spaces and punctuation are lost for good; only letters-only uppercase text
round-trips exactly.

Stepping
--------
carry_at=25 (default) keeps the historical early carry: cog 1 rolls over when
it reaches 25 rather than 26. Pass carry_at=26 for a true 26-position odometer.
third_rotor_steps=False freezes cog 3 (the historical program never actually
advanced it). Either knob changes the ciphertext, so both ends must agree.

Public API
----------
convert(text, setting1, setting2, setting3) -> str
CipherEngine(bank=None, *, carry_at=25, third_rotor_steps=True).convert(...)

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import re
from typing import Optional, Tuple

from pair_map import ALPHABET, ALPHABET_SIZE, EnigmaError, InvalidSymbolError
from rotor_bank import ROTOR_COUNT, RotorBank, standard_bank

# =========================
# Constants
# =========================

SETTING_MIN = 0
SETTING_MAX = ALPHABET_SIZE - 1   # 25
DEFAULT_CARRY_AT = 25

_NON_LETTERS = re.compile(r"[^A-Z]")

Settings = Tuple[int, int, int]

# =========================
# Exceptions
# =========================

class RangeError(EnigmaError, ValueError):
    """A cog setting outside 0..25."""

class EngineFault(InvalidSymbolError):
    """A non-letter reached substitution after normalization (engine bug, not user error)."""

# =========================
# Helpers
# =========================

def normalize_text(text: str) -> str:
    """Uppercase and strip everything that is not A–Z."""
    if not isinstance(text, str):
        raise TypeError("text must be a str")
    return _NON_LETTERS.sub("", text.upper())

def validate_settings(*settings) -> Settings:
    if len(settings) != ROTOR_COUNT:
        raise RangeError(f"expected {ROTOR_COUNT} cog settings, got {len(settings)}")
    for n, s in enumerate(settings, 1):
        if isinstance(s, bool) or not isinstance(s, int) or not SETTING_MIN <= s <= SETTING_MAX:
            raise RangeError(
                f"Improper cog setting{n}={s!r} (must be between {SETTING_MIN} and {SETTING_MAX})"
            )
    return tuple(settings)

# =========================
# Engine
# =========================

class CipherEngine:
    """
    Holds the (immutable) rotor bank and stepping policy; all per-message state
    lives inside convert().
    """

    def __init__(self, bank: Optional[RotorBank] = None, *,
                 carry_at: int = DEFAULT_CARRY_AT, third_rotor_steps: bool = True):
        if isinstance(carry_at, bool) or not isinstance(carry_at, int) or not 1 <= carry_at <= ALPHABET_SIZE:
            raise ValueError(f"carry_at must be an int in 1..{ALPHABET_SIZE}")
        self.bank = bank if bank is not None else standard_bank()
        self.carry_at = carry_at
        self.third_rotor_steps = bool(third_rotor_steps)

    def __repr__(self) -> str:
        return (f"CipherEngine(carry_at={self.carry_at}, "
                f"third_rotor_steps={self.third_rotor_steps})")

    def step(self, settings: Settings) -> Settings:
        """Advance the cogs by one key press."""
        s1, s2, s3 = settings
        s1 += 1
        if s1 >= self.carry_at:
            s1 = 0
            s2 += 1
            if s2 >= self.carry_at:
                s2 = 0
                if self.third_rotor_steps:
                    s3 = (s3 + 1) % ALPHABET_SIZE
        return s1, s2, s3

    def convert_letter(self, index: int, settings: Settings) -> int:
        """Substitute one letter index at the given cog settings (no stepping)."""
        bank = self.bank
        c = index
        for r in range(ROTOR_COUNT):
            c = bank.forward(r, c, settings[r])
        c = bank.reflect(c)
        for r in reversed(range(ROTOR_COUNT)):
            c = bank.backward(r, c, settings[r])
        return c

    def convert(self, text: str, setting1: int, setting2: int, setting3: int) -> str:
        """
        Encrypt or decrypt `text` (the same operation). Raises RangeError on a
        bad setting; never returns partial output.
        """
        settings = validate_settings(setting1, setting2, setting3)
        message = normalize_text(text)

        out = []
        try:
            for ch in message:
                out.append(ALPHABET[self.convert_letter(ALPHABET.index(ch), settings)])
                settings = self.step(settings)
        except InvalidSymbolError as e:
            raise EngineFault(f"internal substitution failure: {e}") from e
        return "".join(out)


_DEFAULT_ENGINE: Optional[CipherEngine] = None

def default_engine() -> CipherEngine:
    global _DEFAULT_ENGINE
    if _DEFAULT_ENGINE is None:
        _DEFAULT_ENGINE = CipherEngine()
    return _DEFAULT_ENGINE

def convert(text: str, setting1: int, setting2: int, setting3: int) -> str:
    """convert() on the standard engine."""
    return default_engine().convert(text, setting1, setting2, setting3)
