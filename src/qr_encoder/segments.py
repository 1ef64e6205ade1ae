"""Segment construction: turning text or bytes into typed bit streams."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence, Tuple

from .bits import BitBuffer
from .errors import InvalidArgumentError

ALPHANUMERIC_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"

_NUMERIC_RE = re.compile(r"[0-9]*")
_ALPHANUMERIC_RE = re.compile(r"[A-Z0-9 $%*+./:-]*")
_ALPHANUMERIC_INDEX = {ch: i for i, ch in enumerate(ALPHANUMERIC_CHARSET)}


class Mode(Enum):
    """Segment mode: 4-bit indicator and character count widths per version band."""

    NUMERIC = (0x1, (10, 12, 14))
    ALPHANUMERIC = (0x2, (9, 11, 13))
    BYTE = (0x4, (8, 16, 16))
    KANJI = (0x8, (8, 10, 12))
    ECI = (0x7, (0, 0, 0))

    @property
    def mode_bits(self) -> int:
        return self.value[0]

    def num_char_count_bits(self, version: int) -> int:
        # Bands: 1-9, 10-26, 27-40
        return self.value[1][(version + 7) // 17]


@dataclass(frozen=True)
class QrSegment:
    """Immutable run of data encoded under a single mode.

    ``num_chars`` counts input units (digits, characters, bytes), not bits.
    ECI segments always have ``num_chars == 0``.
    """

    mode: Mode
    num_chars: int
    bit_data: Tuple[int, ...] = field(repr=False)

    def __post_init__(self) -> None:
        if self.num_chars < 0:
            raise InvalidArgumentError("character count must be non-negative")
        object.__setattr__(self, "bit_data", tuple(self.bit_data))

    def get_data(self) -> List[int]:
        return list(self.bit_data)

    @staticmethod
    def make_bytes(data: Sequence[int]) -> "QrSegment":
        bb = BitBuffer()
        for b in data:
            bb.append_bits(b, 8)
        return QrSegment(Mode.BYTE, len(data), bb.bits)

    @staticmethod
    def make_numeric(digits: str) -> "QrSegment":
        if not QrSegment.is_numeric(digits):
            raise InvalidArgumentError("string contains non-numeric characters")
        bb = BitBuffer()
        i = 0
        while i < len(digits):
            n = min(len(digits) - i, 3)
            bb.append_bits(int(digits[i:i + n]), n * 3 + 1)
            i += n
        return QrSegment(Mode.NUMERIC, len(digits), bb.bits)

    @staticmethod
    def make_alphanumeric(text: str) -> "QrSegment":
        if not QrSegment.is_alphanumeric(text):
            raise InvalidArgumentError("string contains characters outside the alphanumeric set")
        bb = BitBuffer()
        for i in range(0, len(text) - 1, 2):
            pair = _ALPHANUMERIC_INDEX[text[i]] * 45 + _ALPHANUMERIC_INDEX[text[i + 1]]
            bb.append_bits(pair, 11)
        if len(text) % 2 == 1:
            bb.append_bits(_ALPHANUMERIC_INDEX[text[-1]], 6)
        return QrSegment(Mode.ALPHANUMERIC, len(text), bb.bits)

    @staticmethod
    def make_segments(text: str) -> List["QrSegment"]:
        """Pick the most compact single mode for ``text``; UTF-8 bytes as a fallback."""
        if text == "":
            return []
        if QrSegment.is_numeric(text):
            return [QrSegment.make_numeric(text)]
        if QrSegment.is_alphanumeric(text):
            return [QrSegment.make_alphanumeric(text)]
        return [QrSegment.make_bytes(text.encode("utf-8"))]

    @staticmethod
    def make_eci(assign_value: int) -> "QrSegment":
        bb = BitBuffer()
        if assign_value < 0:
            raise InvalidArgumentError("ECI assignment value out of range")
        elif assign_value < (1 << 7):
            bb.append_bits(assign_value, 8)
        elif assign_value < (1 << 14):
            bb.append_bits(0b10, 2)
            bb.append_bits(assign_value, 14)
        elif assign_value < 1_000_000:
            bb.append_bits(0b110, 3)
            bb.append_bits(assign_value, 21)
        else:
            raise InvalidArgumentError("ECI assignment value out of range")
        return QrSegment(Mode.ECI, 0, bb.bits)

    @staticmethod
    def is_numeric(text: str) -> bool:
        return _NUMERIC_RE.fullmatch(text) is not None

    @staticmethod
    def is_alphanumeric(text: str) -> bool:
        return _ALPHANUMERIC_RE.fullmatch(text) is not None

    @staticmethod
    def get_total_bits(segs: Sequence["QrSegment"], version: int) -> float:
        """Bits needed to encode ``segs`` at ``version``.

        Returns ``math.inf`` when a segment has more characters than the
        version's count field can express.
        """
        result = 0
        for seg in segs:
            ccbits = seg.mode.num_char_count_bits(version)
            if seg.num_chars >= (1 << ccbits):
                return float("inf")
            result += 4 + ccbits + len(seg.bit_data)
        return result
