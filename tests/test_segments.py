"""Tests for segment construction."""

import dataclasses

import pytest

from qr_encoder.errors import InvalidArgumentError
from qr_encoder.segments import Mode, QrSegment


def _fields(bits, widths):
    values = []
    pos = 0
    for width in widths:
        value = 0
        for bit in bits[pos:pos + width]:
            value = (value << 1) | bit
        values.append(value)
        pos += width
    assert pos == len(bits)
    return values


def test_numeric_groups_of_three():
    """Digits are packed three per 10-bit field, remainder in 3n+1 bits."""
    seg = QrSegment.make_numeric("1234567")
    assert seg.mode is Mode.NUMERIC
    assert seg.num_chars == 7
    assert len(seg.bit_data) == 10 + 10 + 4
    assert _fields(seg.get_data(), [10, 10, 4]) == [123, 456, 7]


def test_numeric_two_digit_tail():
    seg = QrSegment.make_numeric("12345")
    assert _fields(seg.get_data(), [10, 7]) == [123, 45]


def test_numeric_rejects_other_characters():
    with pytest.raises(InvalidArgumentError):
        QrSegment.make_numeric("12a4")
    with pytest.raises(ValueError):
        QrSegment.make_numeric("١٢٣")  # non-ASCII digits


def test_alphanumeric_pair():
    """Pairs become value = 45 * first + second in 11 bits."""
    seg = QrSegment.make_alphanumeric("AB")
    assert seg.mode is Mode.ALPHANUMERIC
    assert seg.num_chars == 2
    assert _fields(seg.get_data(), [11]) == [10 * 45 + 11]


def test_alphanumeric_odd_tail():
    seg = QrSegment.make_alphanumeric("AB:")
    assert _fields(seg.get_data(), [11, 6]) == [461, 44]


def test_alphanumeric_rejects_lowercase():
    with pytest.raises(InvalidArgumentError):
        QrSegment.make_alphanumeric("Hello")


def test_bytes_verbatim():
    seg = QrSegment.make_bytes(b"\x00\xff\x41")
    assert seg.mode is Mode.BYTE
    assert seg.num_chars == 3
    assert _fields(seg.get_data(), [8, 8, 8]) == [0x00, 0xFF, 0x41]


@pytest.mark.parametrize(
    "value, widths, expected",
    [
        (0, [8], [0]),
        (127, [8], [127]),
        (128, [2, 14], [0b10, 128]),
        (16383, [2, 14], [0b10, 16383]),
        (16384, [3, 21], [0b110, 16384]),
        (999999, [3, 21], [0b110, 999999]),
    ],
)
def test_eci_prefix_code(value, widths, expected):
    seg = QrSegment.make_eci(value)
    assert seg.mode is Mode.ECI
    assert seg.num_chars == 0
    assert _fields(seg.get_data(), widths) == expected


@pytest.mark.parametrize("value", [-1, 1_000_000, 2 ** 31])
def test_eci_out_of_range(value):
    with pytest.raises(InvalidArgumentError):
        QrSegment.make_eci(value)


def test_make_segments_classification():
    """Empty, numeric, alphanumeric, then UTF-8 bytes."""
    assert QrSegment.make_segments("") == []

    (seg,) = QrSegment.make_segments("0123")
    assert seg.mode is Mode.NUMERIC

    (seg,) = QrSegment.make_segments("HELLO WORLD")
    assert seg.mode is Mode.ALPHANUMERIC

    (seg,) = QrSegment.make_segments("héllo")
    assert seg.mode is Mode.BYTE
    assert seg.num_chars == len("héllo".encode("utf-8")) == 6


def test_predicates_accept_empty_string():
    assert QrSegment.is_numeric("")
    assert QrSegment.is_alphanumeric("")
    assert not QrSegment.is_numeric("12 3")
    assert QrSegment.is_alphanumeric("$%*+-./: ")


def test_char_count_bits_by_version_band():
    assert [Mode.NUMERIC.num_char_count_bits(v) for v in (1, 9, 10, 26, 27, 40)] == [10, 10, 12, 12, 14, 14]
    assert [Mode.BYTE.num_char_count_bits(v) for v in (9, 10, 40)] == [8, 16, 16]
    assert Mode.ECI.num_char_count_bits(20) == 0


def test_get_total_bits():
    segs = [QrSegment.make_eci(26), QrSegment.make_numeric("1234567")]
    assert QrSegment.get_total_bits(segs, 1) == (4 + 0 + 8) + (4 + 10 + 24)
    assert QrSegment.get_total_bits(segs, 10) == (4 + 0 + 8) + (4 + 12 + 24)


def test_get_total_bits_count_overflow_is_infinite():
    seg = QrSegment.make_bytes(bytes(256))
    assert QrSegment.get_total_bits([seg], 9) == float("inf")
    assert QrSegment.get_total_bits([seg], 10) == 4 + 16 + 256 * 8


def test_negative_char_count_rejected():
    with pytest.raises(InvalidArgumentError):
        QrSegment(Mode.BYTE, -1, [])


def test_segment_is_immutable():
    seg = QrSegment.make_numeric("42")
    with pytest.raises(dataclasses.FrozenInstanceError):
        seg.num_chars = 3
    data = seg.get_data()
    data.append(1)
    assert len(seg.bit_data) == 7
