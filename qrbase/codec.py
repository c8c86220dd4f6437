#!/usr/bin/env python3
"""
Base43/Base44 Codec

Reversible text encoding of binary data over the QR-compatible alphabets
defined in alphabet.py. One Codec class implements the arithmetic; the
BASE43 and BASE44 instances differ only in their table and error type.

Byte-Pair Encoding (arbitrary length):
    Bytes are taken in pairs (hi, lo) and packed as x = hi * 256 + lo.
    x is split into three base-N digits, least significant digit first:

        d0 = x % N, d1 = (x // N) % N, d2 = x // N**2   ->  "d0 d1 d2"

    A trailing unpaired byte becomes two digits "d0 d1". Output length is
    ceil(3 * len(data) / 2).

    Group limits on decode:
        3 digits: value must be <= 0xFFFF (N**3 - 1 is larger for N >= 41)
        2 digits: value must be <= 0xFF
        1 digit:  always an error (DANGLING)

Fixed-Bit-Width Encoding (1..128 bits):
    The buffer is read as one little-endian integer (data[0] is least
    significant) masked to `bits` bits, then written as the minimum number
    of base-N digits D with N**D >= 2**bits, most significant digit first.

        bits=103, N=44 -> 19 digits
        bits=104, N=44 -> 20 digits
        bits=128, N=43 -> 24 digits

    The decoder accepts any digit string whose value fits the 128-bit
    accumulator and is below 2**bits, and returns ceil(bits / 8) bytes.

Fixed 103-Bit Encoding:
    13 bytes <-> exactly 19 digits for both alphabets.
"""

import math
from typing import Dict, Iterable, List, Optional, Type, Union

from .alphabet import BASE43_ALPHABET, BASE44_ALPHABET, Alphabet
from .errors import Base43Error, Base44Error, CodecError, ErrorKind


# =============================================================================
# Constants
# =============================================================================

# Largest value of a 3-digit (two byte) and a 2-digit (one byte) group
PAIR_MAX = 0xFFFF
BYTE_MAX = 0xFF

# Fixed-bit-width codec limits
MAX_BITS = 128
MAX_BIT_BYTES = 16
ACCUMULATOR_MAX = (1 << MAX_BITS) - 1

# Fixed 103-bit specialization
FIXED_103_BITS = 103
FIXED_103_BYTES = 13
FIXED_103_DIGITS = 19

ByteInput = Union[bytes, bytearray, memoryview, Iterable[int]]


# =============================================================================
# Helpers
# =============================================================================

def encoded_length(byte_count: int) -> int:
    """Length of the byte-pair encoding of `byte_count` bytes."""
    return (3 * byte_count + 1) // 2


def _as_bytes(data: ByteInput) -> bytes:
    # bytes(5) would silently build five zero bytes
    if isinstance(data, (str, int)):
        raise TypeError(f"Expected a bytes-like object, got {type(data).__name__}")
    return bytes(data)


def _check_bits(bits: int) -> None:
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise TypeError(f"Bit count must be an int, got {type(bits).__name__}")
    if not 1 <= bits <= MAX_BITS:
        raise ValueError(f"Bit count must be 1-{MAX_BITS}, got {bits}")


# =============================================================================
# Codec
# =============================================================================

class Codec:
    """
    Encoder/decoder bound to one alphabet.

    Instances hold no mutable state apart from a digit-count cache, so a
    single instance can be shared between threads.
    """

    def __init__(self, alphabet: Alphabet, error_class: Type[CodecError] = CodecError):
        if alphabet.base ** 3 <= PAIR_MAX or alphabet.base ** 2 <= BYTE_MAX:
            raise ValueError(f"Alphabet {alphabet.name} is too small for byte-pair encoding")
        self.alphabet = alphabet
        self.error_class = error_class
        self._digit_counts: Dict[int, int] = {}

    @property
    def name(self) -> str:
        return self.alphabet.name

    @property
    def base(self) -> int:
        return self.alphabet.base

    def __repr__(self) -> str:
        return f"Codec({self.alphabet.name})"

    # -------------------------------------------------------------------------
    # Error Helpers
    # -------------------------------------------------------------------------

    def _error(self, kind: ErrorKind, position: Optional[int] = None) -> CodecError:
        return self.error_class(kind, self.alphabet.name, position)

    def _digit(self, ch: str, position: int) -> int:
        value = self.alphabet.value(ch)
        if value is None:
            raise self._error(ErrorKind.INVALID_CHAR, position)
        return value

    # -------------------------------------------------------------------------
    # Byte-Pair Codec
    # -------------------------------------------------------------------------

    def encode(self, data: ByteInput) -> str:
        """
        Encode arbitrary bytes.

        Every 2 bytes produce 3 characters and a final single byte produces
        2 characters, least significant digit first. Never fails.
        """
        data = _as_bytes(data)
        chars = self.alphabet.chars
        n = self.base
        out: List[str] = []

        i = 0
        while i + 1 < len(data):
            x = data[i] * 256 + data[i + 1]
            x, d0 = divmod(x, n)
            d2, d1 = divmod(x, n)
            out.append(chars[d0] + chars[d1] + chars[d2])
            i += 2

        if i < len(data):
            d1, d0 = divmod(data[i], n)
            out.append(chars[d0] + chars[d1])

        return "".join(out)

    def decode(self, s: str) -> bytes:
        """
        Decode a byte-pair encoded string.

        Raises:
            CodecError: INVALID_CHAR for a foreign character, DANGLING for a
                single trailing character, OVERFLOW when a group exceeds
                the byte range it encodes.
        """
        if isinstance(s, (bytes, bytearray)):
            s = s.decode("latin-1")
        if not isinstance(s, str):
            raise TypeError(f"Expected str, got {type(s).__name__}")

        n = self.base
        out = bytearray()

        i = 0
        while i + 2 < len(s):
            c0 = self._digit(s[i], i)
            c1 = self._digit(s[i + 1], i + 1)
            c2 = self._digit(s[i + 2], i + 2)
            x = c2 * n * n + c1 * n + c0
            if x > PAIR_MAX:
                raise self._error(ErrorKind.OVERFLOW, i)
            out.append(x >> 8)
            out.append(x & 0xFF)
            i += 3

        remaining = len(s) - i
        if remaining == 1:
            # A foreign character outranks the structural error
            self._digit(s[i], i)
            raise self._error(ErrorKind.DANGLING, i)
        if remaining == 2:
            c0 = self._digit(s[i], i)
            c1 = self._digit(s[i + 1], i + 1)
            x = c1 * n + c0
            if x > BYTE_MAX:
                raise self._error(ErrorKind.OVERFLOW, i)
            out.append(x)

        return bytes(out)

    # -------------------------------------------------------------------------
    # Fixed-Bit-Width Codec
    # -------------------------------------------------------------------------

    def digit_count(self, bits: int) -> int:
        """
        Minimum number of digits D with base**D >= 2**bits.

        The logarithm only gives the starting estimate; the result is
        settled with exact integer comparisons.
        """
        _check_bits(bits)
        count = self._digit_counts.get(bits)
        if count is None:
            limit = 1 << bits
            count = max(1, math.ceil(bits * math.log(2) / math.log(self.base)))
            while self.base ** count < limit:
                count += 1
            while count > 1 and self.base ** (count - 1) >= limit:
                count -= 1
            self._digit_counts[bits] = count
        return count

    def encode_bits(self, bits: int, data: ByteInput) -> str:
        """
        Encode the low `bits` bits of a little-endian buffer.

        Args:
            bits: Significant bit count, 1-128.
            data: At most 16 bytes, data[0] least significant. Bits above
                `bits` (padding in the last byte) are ignored.

        Returns:
            digit_count(bits) characters, most significant digit first.

        Raises:
            ValueError: bits out of range or more than 16 bytes.
        """
        _check_bits(bits)
        data = _as_bytes(data)
        if len(data) > MAX_BIT_BYTES:
            raise ValueError(f"At most {MAX_BIT_BYTES} bytes fit in {MAX_BITS} bits, got {len(data)}")

        chars = self.alphabet.chars
        n = self.base
        value = int.from_bytes(data, "little") & ((1 << bits) - 1)

        digits: List[str] = []
        for _ in range(self.digit_count(bits)):
            value, digit = divmod(value, n)
            digits.append(chars[digit])
        digits.reverse()
        return "".join(digits)

    def decode_bits(self, bits: int, s: str) -> bytes:
        """
        Decode a fixed-bit-width string into ceil(bits / 8) bytes.

        Raises:
            CodecError: INVALID_CHAR for a foreign character, OVERFLOW if
                the value exceeds 128 bits or is >= 2**bits.
            ValueError: bits out of range.
        """
        _check_bits(bits)
        if not isinstance(s, str):
            raise TypeError(f"Expected str, got {type(s).__name__}")

        # All characters are validated before any arithmetic
        digits = [self._digit(ch, i) for i, ch in enumerate(s)]

        n = self.base
        value = 0
        for i, digit in enumerate(digits):
            if value > (ACCUMULATOR_MAX - digit) // n:
                raise self._error(ErrorKind.OVERFLOW, i)
            value = value * n + digit

        if value >> bits:
            raise self._error(ErrorKind.OVERFLOW)

        return value.to_bytes((bits + 7) // 8, "little")

    def encode_103bits(self, data: ByteInput) -> str:
        """Encode exactly 13 bytes (103 significant bits) as 19 characters."""
        data = _as_bytes(data)
        if len(data) != FIXED_103_BYTES:
            raise ValueError(f"Expected {FIXED_103_BYTES} bytes, got {len(data)}")
        return self.encode_bits(FIXED_103_BITS, data)

    def decode_103bits(self, s: str) -> bytes:
        """Decode exactly 19 characters into 13 bytes."""
        if len(s) != FIXED_103_DIGITS:
            raise self._error(ErrorKind.DANGLING)
        return self.decode_bits(FIXED_103_BITS, s)


# =============================================================================
# Codec Instances
# =============================================================================

BASE43 = Codec(BASE43_ALPHABET, Base43Error)
BASE44 = Codec(BASE44_ALPHABET, Base44Error)

CODECS: Dict[str, Codec] = {
    BASE43.name: BASE43,
    BASE44.name: BASE44,
}


def get_codec(alphabet: Union[int, str]) -> Codec:
    """
    Look up a codec by alphabet size or name.

    Accepts 43, 44, "43", "44", "base43" or "base44".
    """
    key = str(alphabet).lower()
    if not key.startswith("base"):
        key = "base" + key
    codec = CODECS.get(key)
    if codec is None:
        raise ValueError(f"Unknown alphabet: {alphabet!r} (expected 43 or 44)")
    return codec


# Module-level API bound to the base43 codec
encode = BASE43.encode
decode = BASE43.decode
encode_bits = BASE43.encode_bits
decode_bits = BASE43.decode_bits
encode_103bits = BASE43.encode_103bits
decode_103bits = BASE43.decode_103bits
