#!/usr/bin/env python3
"""
Alphabet Tables

Character tables for the QR-compatible base43/base44 encodings.

Both alphabets are drawn from the QR code alphanumeric mode character set
("0-9", "A-Z", space and "$%*+-./:"), which is the densest QR mode that is
still printable. Space is always excluded so encoded strings survive URLs
and shell arguments untouched.

Alphabets:
    base43: 0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ%*+-./:
    base44: 0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ$%*+-./:

base44 is base43 with "$" inserted at index 36. A digit value therefore
maps to the same character in both tables only below 36.
"""

from typing import Dict, Optional


# =============================================================================
# Constants
# =============================================================================

# Characters an alphabet may be built from (QR alphanumeric mode minus space)
ALLOWED_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ$%*+-./:"

BASE43_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ%*+-./:"
BASE44_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ$%*+-./:"


# =============================================================================
# Alphabet
# =============================================================================

class Alphabet:
    """
    Ordered digit table: index = digit value, character = printed symbol.

    The reverse lookup is built once at construction, so value() is a
    single dict probe.
    """

    def __init__(self, name: str, chars: str):
        if len(set(chars)) != len(chars):
            raise ValueError(f"Alphabet {name} has duplicate characters")
        for ch in chars:
            if ch not in ALLOWED_CHARS:
                raise ValueError(f"Alphabet {name} contains unsupported character {ch!r}")

        self.name = name
        self.chars = chars
        self._values: Dict[str, int] = {ch: i for i, ch in enumerate(chars)}

    @property
    def base(self) -> int:
        """Number of digits (the radix)."""
        return len(self.chars)

    def value(self, ch: str) -> Optional[int]:
        """Digit value of a character, or None if it is not in the alphabet."""
        return self._values.get(ch)

    def char(self, value: int) -> str:
        if not 0 <= value < len(self.chars):
            raise ValueError(f"Digit value must be 0-{len(self.chars) - 1}, got {value}")
        return self.chars[value]

    def __contains__(self, ch: object) -> bool:
        return ch in self._values

    def __len__(self) -> int:
        return len(self.chars)

    def __repr__(self) -> str:
        return f"Alphabet({self.name!r}, {self.chars!r})"


BASE43_ALPHABET = Alphabet("base43", BASE43_CHARS)
BASE44_ALPHABET = Alphabet("base44", BASE44_CHARS)
