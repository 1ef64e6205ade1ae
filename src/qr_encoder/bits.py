"""Bit buffer used to assemble segment and codeword streams."""

from __future__ import annotations

from typing import Iterable, List

from .errors import check


class BitBuffer:
    """Growable sequence of 0/1 ints, written most significant bit first."""

    def __init__(self, bits: Iterable[int] = ()) -> None:
        self.bits: List[int] = list(bits)

    def __len__(self) -> int:
        return len(self.bits)

    def append_bits(self, value: int, length: int) -> None:
        """Append the low ``length`` bits of ``value``, big-endian."""
        check(0 <= length <= 31 and value >> length == 0, "value out of range")
        for i in reversed(range(length)):
            self.bits.append((value >> i) & 1)

    def extend(self, bits: Iterable[int]) -> None:
        self.bits.extend(bits)

    def append_terminator(self, capacity_bits: int) -> None:
        """Add up to four zero bits, then zero-pad to a byte boundary."""
        check(len(self.bits) <= capacity_bits, "bit stream exceeds capacity")
        self.append_bits(0, min(4, capacity_bits - len(self.bits)))
        self.append_bits(0, (8 - len(self.bits) % 8) % 8)
        check(len(self.bits) % 8 == 0)

    def to_codewords(self) -> List[int]:
        check(len(self.bits) % 8 == 0, "bit stream is not byte aligned")
        codewords = []
        for i in range(0, len(self.bits), 8):
            chunk = 0
            for bit in self.bits[i:i + 8]:
                chunk = (chunk << 1) | bit
            codewords.append(chunk)
        return codewords
