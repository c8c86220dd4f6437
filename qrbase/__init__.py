"""
QR-Compatible Base43/Base44 Encoding

Reversible encoding of arbitrary binary data into short strings drawn from
the QR code alphanumeric character set, minus space (and minus "$" for
base43), so payloads survive QR codes, URLs and shell arguments unchanged.

Architecture:
    alphabet.py   Character tables and value lookup
    errors.py     CodecError taxonomy (INVALID_CHAR, DANGLING, OVERFLOW)
    codec.py      Codec class, BASE43/BASE44 instances
        │
        ├── Byte-pair codec:        2 bytes <-> 3 chars, 1 byte <-> 2 chars
        ├── Fixed-bit-width codec:  1..128 bits <-> minimal digit count
        └── Fixed 103-bit codec:    13 bytes <-> 19 chars
    config.py     YAML configuration and logging setup
    cli.py        qrbase command (python -m qrbase)
    api.py        FastAPI REST service (optional)

Usage:
    from qrbase import BASE44, CodecError, decode, encode

    encode(b"Hello")                    # "01AL0FP2" (base43)
    decode("01AL0FP2")                  # b"Hello"
    BASE44.encode_bits(103, bytes(13))  # 19 characters

    try:
        decode("A")
    except CodecError as e:
        print(e.kind)                   # ErrorKind.DANGLING
"""

__version__ = "0.1.0"

from .alphabet import BASE43_ALPHABET, BASE44_ALPHABET, Alphabet
from .codec import (
    BASE43,
    BASE44,
    FIXED_103_DIGITS,
    MAX_BITS,
    Codec,
    decode,
    decode_103bits,
    decode_bits,
    encode,
    encode_103bits,
    encode_bits,
    encoded_length,
    get_codec,
)
from .errors import Base43Error, Base44Error, CodecError, ErrorKind

__all__ = [
    # Alphabets
    "Alphabet",
    "BASE43_ALPHABET",
    "BASE44_ALPHABET",
    # Codecs
    "Codec",
    "BASE43",
    "BASE44",
    "get_codec",
    "encoded_length",
    "MAX_BITS",
    "FIXED_103_DIGITS",
    # Base43 API
    "encode",
    "decode",
    "encode_bits",
    "decode_bits",
    "encode_103bits",
    "decode_103bits",
    # Errors
    "ErrorKind",
    "CodecError",
    "Base43Error",
    "Base44Error",
]
