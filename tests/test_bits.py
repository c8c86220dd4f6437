#!/usr/bin/env python3
"""
Fixed-Bit-Width Codec Tests

Digit counts at every bit width, MSB-first output, range checks and the
fixed 103-bit specialization.
"""

import random

import pytest

from qrbase import (
    BASE43,
    BASE44,
    FIXED_103_DIGITS,
    MAX_BITS,
    CodecError,
    ErrorKind,
    decode_103bits,
    decode_bits,
    encode_103bits,
    encode_bits,
)


CODECS = [BASE43, BASE44]


def brute_force_digits(base, bits):
    count = 1
    while base ** count <= (1 << bits) - 1:
        count += 1
    return count


def masked(data, bits):
    """Clear padding bits above `bits` in a little-endian buffer."""
    value = int.from_bytes(data, "little") & ((1 << bits) - 1)
    return value.to_bytes((bits + 7) // 8, "little")


# =============================================================================
# Digit Count
# =============================================================================

@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_digit_count_matches_exact_minimum(codec):
    for bits in range(1, MAX_BITS + 1):
        assert codec.digit_count(bits) == brute_force_digits(codec.base, bits)


def test_digit_count_boundaries():
    assert BASE44.digit_count(103) == 19
    assert BASE44.digit_count(104) == 20
    assert BASE43.digit_count(103) == 19
    assert BASE43.digit_count(104) == 20
    assert BASE43.digit_count(128) == 24
    assert BASE44.digit_count(128) == 24
    assert BASE43.digit_count(1) == 1
    assert BASE43.digit_count(8) == 2
    assert BASE43.digit_count(16) == 3


@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_fixed_103_digit_constant(codec):
    assert codec.digit_count(103) == FIXED_103_DIGITS


# =============================================================================
# Encoding
# =============================================================================

def test_known_vectors_msb_first():
    # Same digits as the byte-pair codec, opposite order
    assert encode_bits(8, b"\xff") == "5."
    assert encode_bits(16, b"\xff\xff") == "ZJ3"
    # Little-endian: b"\x01\x00" is the value 1
    assert encode_bits(16, b"\x01\x00") == "001"
    assert BASE44.encode_bits(8, b"\xff") == "5Z"


def test_encode_length_boundaries_base44():
    assert len(BASE44.encode_bits(103, bytes(13))) == 19
    assert len(BASE44.encode_bits(104, bytes(13))) == 20
    assert BASE44.encode_bits(103, bytes(13)) == "0" * 19


@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_encode_length_is_digit_count(codec):
    for bits in range(1, MAX_BITS + 1):
        data = b"\xff" * ((bits + 7) // 8)
        encoded = codec.encode_bits(bits, data)
        assert len(encoded) == codec.digit_count(bits)
        assert all(ch in codec.alphabet for ch in encoded)


def test_padding_bits_are_ignored():
    # Only the low 4 bits of 0xFF count
    assert encode_bits(4, b"\xff") == encode_bits(4, b"\x0f") == "F"
    assert decode_bits(4, "F") == b"\x0f"


def test_short_buffer_is_zero_extended():
    assert encode_bits(64, b"\x01") == encode_bits(64, b"\x01" + bytes(7))


@pytest.mark.parametrize("bits", [0, -1, 129, 1000])
def test_bit_count_out_of_range(bits):
    with pytest.raises(ValueError) as exc_info:
        encode_bits(bits, b"\x00")
    assert not isinstance(exc_info.value, CodecError)

    with pytest.raises(ValueError) as exc_info:
        decode_bits(bits, "0")
    assert not isinstance(exc_info.value, CodecError)


def test_oversized_buffer_rejected():
    with pytest.raises(ValueError) as exc_info:
        encode_bits(128, bytes(17))
    assert not isinstance(exc_info.value, CodecError)


def test_non_int_bit_count_rejected():
    with pytest.raises(TypeError):
        encode_bits(8.0, b"\x00")
    with pytest.raises(TypeError):
        encode_bits(True, b"\x00")


# =============================================================================
# Decoding
# =============================================================================

@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_roundtrip_every_width(codec):
    rng = random.Random(128)
    for bits in range(1, MAX_BITS + 1):
        for _ in range(5):
            data = bytes(rng.randrange(256) for _ in range((bits + 7) // 8))
            decoded = codec.decode_bits(bits, codec.encode_bits(bits, data))
            assert len(decoded) == (bits + 7) // 8
            assert decoded == masked(data, bits)


@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_roundtrip_max_value(codec):
    data = b"\xff" * 16
    assert codec.decode_bits(128, codec.encode_bits(128, data)) == data


def test_decode_value_at_limit():
    assert decode_bits(8, "5.") == b"\xff"
    with pytest.raises(CodecError) as exc_info:
        decode_bits(8, "60")  # 6 * 43 = 258
    assert exc_info.value.kind == ErrorKind.OVERFLOW

    with pytest.raises(CodecError) as exc_info:
        decode_bits(4, "G")  # 16
    assert exc_info.value.kind == ErrorKind.OVERFLOW


def test_decode_overflows_accumulator():
    # 43**24 - 1 does not fit in 128 bits
    with pytest.raises(CodecError) as exc_info:
        decode_bits(128, ":" * 24)
    assert exc_info.value.kind == ErrorKind.OVERFLOW

    with pytest.raises(CodecError) as exc_info:
        decode_bits(128, ":" * 200)
    assert exc_info.value.kind == ErrorKind.OVERFLOW


def test_decode_invalid_char_reported_before_overflow():
    with pytest.raises(CodecError) as exc_info:
        decode_bits(8, ":" * 40 + "\t")
    assert exc_info.value.kind == ErrorKind.INVALID_CHAR
    assert exc_info.value.position == 40


def test_decode_leading_zeros_and_empty():
    assert decode_bits(8, "0" * 30 + "5.") == b"\xff"
    assert decode_bits(12, "") == b"\x00\x00"


def test_decode_error_identity_per_alphabet():
    from qrbase import Base43Error, Base44Error

    with pytest.raises(Base44Error):
        BASE44.decode_bits(8, "\t")
    with pytest.raises(Base43Error):
        BASE43.decode_bits(8, "$")
    # "$" is a digit in base44
    assert BASE44.decode_bits(8, "$") == bytes([36])


# =============================================================================
# Fixed 103 Bits
# =============================================================================

@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_103bits_roundtrip(codec):
    data = bytes(range(1, 14))
    encoded = codec.encode_103bits(data)
    assert len(encoded) == 19
    assert encoded == codec.encode_bits(103, data)
    assert codec.decode_103bits(encoded) == data


def test_103bits_zero():
    assert encode_103bits(bytes(13)) == "0" * 19
    assert decode_103bits("0" * 19) == bytes(13)


def test_103bits_top_bit_is_padding():
    data = b"\xff" * 13
    decoded = decode_103bits(encode_103bits(data))
    assert decoded == b"\xff" * 12 + b"\x7f"


@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
@pytest.mark.parametrize("encoded", ["", "0" * 18, "0" * 20, "\t\t\t", " " * 25])
def test_103bits_length_mismatch(codec, encoded):
    with pytest.raises(codec.error_class) as exc_info:
        codec.decode_103bits(encoded)
    assert exc_info.value.kind == ErrorKind.DANGLING


@pytest.mark.parametrize("codec", CODECS, ids=lambda c: c.name)
def test_103bits_rejects_values_over_103_bits(codec):
    top = codec.alphabet.chars[-1]
    with pytest.raises(CodecError) as exc_info:
        codec.decode_103bits(top * 19)
    assert exc_info.value.kind == ErrorKind.OVERFLOW


def test_103bits_invalid_char():
    with pytest.raises(CodecError) as exc_info:
        decode_103bits("0" * 18 + "a")
    assert exc_info.value.kind == ErrorKind.INVALID_CHAR


@pytest.mark.parametrize("size", [0, 12, 14, 16])
def test_103bits_wrong_buffer_size(size):
    with pytest.raises(ValueError) as exc_info:
        encode_103bits(bytes(size))
    assert not isinstance(exc_info.value, CodecError)
