#!/usr/bin/env python3
"""
Decode Error Taxonomy

Every recoverable failure of a decoder is a CodecError tagged with one of
three kinds:

    INVALID_CHAR: a character outside the codec's alphabet
    DANGLING:     a structurally incomplete group (single trailing digit),
                  or a fixed-length string of the wrong length
    OVERFLOW:     a group decodes to a value too large for its byte count

Each alphabet has its own subclass (Base43Error, Base44Error) so callers
can tell which codec rejected the input. Caller contract violations on the
encoding side (bad bit counts, oversized buffers) are plain ValueError and
never a CodecError.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Decode failure categories."""
    INVALID_CHAR = "invalid_char"
    DANGLING = "dangling"
    OVERFLOW = "overflow"


class CodecError(ValueError):
    """Recoverable decode failure."""

    def __init__(self, kind: ErrorKind, alphabet: str, position: Optional[int] = None):
        self.kind = kind
        self.alphabet = alphabet
        self.position = position
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind == ErrorKind.INVALID_CHAR:
            message = f"invalid {self.alphabet} character"
        elif self.kind == ErrorKind.DANGLING:
            message = "dangling character group"
        else:
            message = "value overflow"
        if self.position is not None:
            message += f" at position {self.position}"
        return message


class Base43Error(CodecError):
    """Decode failure of the base43 codec."""


class Base44Error(CodecError):
    """Decode failure of the base44 codec."""
