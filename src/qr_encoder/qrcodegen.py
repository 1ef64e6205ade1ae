"""QR Code symbol encoder based on ISO/IEC 18004 (Model 2, versions 1-40)."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Sequence, Tuple

from .bits import BitBuffer
from .errors import DataTooLongError, InvalidArgumentError, check
from .penalty import penalty_score
from .reed_solomon import ReedSolomonGenerator
from .segments import QrSegment

log = logging.getLogger(__name__)

Grid = List[List[bool]]


class Ecc(Enum):
    """Error correction level: (table ordinal, 2-bit format value)."""

    LOW = (0, 1)  # ~7% of codewords recoverable
    MEDIUM = (1, 0)  # ~15%
    QUARTILE = (2, 3)  # ~25%
    HIGH = (3, 2)  # ~30%

    @property
    def ordinal(self) -> int:
        return self.value[0]

    @property
    def format_bits(self) -> int:
        return self.value[1]


_MASK_PATTERNS: Tuple[Callable[[int, int], bool], ...] = (
    lambda x, y: (x + y) % 2 == 0,
    lambda x, y: y % 2 == 0,
    lambda x, y: x % 3 == 0,
    lambda x, y: (x + y) % 3 == 0,
    lambda x, y: (x // 3 + y // 2) % 2 == 0,
    lambda x, y: (x * y) % 2 + (x * y) % 3 == 0,
    lambda x, y: ((x * y) % 2 + (x * y) % 3) % 2 == 0,
    lambda x, y: ((x + y) % 2 + (x * y) % 3) % 2 == 0,
)


class QrCode:
    """An immutable square grid of dark and light modules.

    Build one with :meth:`encode_text`, :meth:`encode_binary` or
    :meth:`encode_segments`. The constructor is the low-level entry point
    taking ready-made data codewords.
    """

    MIN_VERSION = 1
    MAX_VERSION = 40

    LOW = Ecc.LOW
    MEDIUM = Ecc.MEDIUM
    QUARTILE = Ecc.QUARTILE
    HIGH = Ecc.HIGH

    # Indexed by [version - 1][ecc ordinal]
    _ECC_CODEWORDS_PER_BLOCK = (
        (7, 10, 13, 17), (10, 16, 22, 28), (15, 26, 18, 22), (20, 18, 26, 16), (26, 24, 18, 22),
        (18, 16, 24, 28), (20, 18, 18, 26), (24, 22, 22, 26), (30, 22, 20, 24), (18, 26, 24, 28),
        (20, 30, 28, 24), (24, 22, 26, 28), (26, 22, 24, 22), (30, 24, 20, 24), (22, 24, 30, 24),
        (24, 28, 24, 30), (28, 28, 28, 28), (30, 26, 28, 28), (28, 26, 26, 26), (28, 26, 30, 28),
        (28, 26, 28, 30), (28, 28, 30, 24), (30, 28, 30, 30), (30, 28, 30, 30), (26, 28, 30, 30),
        (28, 28, 28, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30),
        (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30),
        (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30), (30, 28, 30, 30),
    )

    _NUM_ERROR_CORRECTION_BLOCKS = (
        (1, 1, 1, 1), (1, 1, 1, 1), (1, 1, 2, 2), (1, 2, 2, 4), (1, 2, 4, 4),
        (2, 4, 4, 4), (2, 4, 6, 5), (2, 4, 6, 6), (2, 5, 8, 8), (4, 5, 8, 8),
        (4, 5, 8, 11), (4, 8, 10, 11), (4, 9, 12, 16), (4, 9, 16, 16), (6, 10, 12, 18),
        (6, 10, 17, 16), (6, 11, 16, 19), (6, 13, 18, 21), (7, 14, 21, 25), (8, 16, 20, 25),
        (8, 17, 23, 25), (9, 17, 23, 34), (9, 18, 25, 30), (10, 20, 27, 32), (12, 21, 29, 35),
        (12, 23, 34, 37), (12, 25, 34, 40), (13, 26, 35, 42), (14, 28, 38, 45), (15, 29, 40, 48),
        (16, 31, 43, 51), (17, 33, 45, 54), (18, 35, 48, 57), (19, 37, 51, 60), (19, 38, 53, 63),
        (20, 40, 56, 66), (21, 43, 59, 70), (22, 45, 62, 74), (24, 47, 65, 77), (25, 49, 68, 81),
    )

    def __init__(self, version: int, ecc: Ecc, data_codewords: Sequence[int], mask: int = -1):
        if not (QrCode.MIN_VERSION <= version <= QrCode.MAX_VERSION):
            raise InvalidArgumentError("Version number out of range")
        if not (-1 <= mask <= 7):
            raise InvalidArgumentError("Mask out of range")
        if not isinstance(ecc, Ecc):
            raise InvalidArgumentError(f"unknown error correction level: {ecc!r}")
        if len(data_codewords) != QrCode.num_data_codewords(version, ecc):
            raise InvalidArgumentError("Data codeword count does not match version and level")
        self._version = version
        self._error_correction_level = ecc
        self._size = version * 4 + 17
        self._modules: Grid = [[False] * self._size for _ in range(self._size)]
        # Lives only for the duration of construction.
        is_function: Grid = [[False] * self._size for _ in range(self._size)]

        self._draw_function_patterns(is_function)
        all_codewords = self._add_ecc_and_interleave(data_codewords)
        self._draw_codewords(all_codewords, is_function)
        if mask == -1:
            mask = self._choose_mask(is_function)
        check(0 <= mask <= 7)
        self._mask = mask
        apply_mask(self._modules, is_function, mask)
        self._draw_format_bits(mask, is_function)

    @staticmethod
    def encode_text(text: str, ecl: Ecc = Ecc.LOW) -> "QrCode":
        return QrCode.encode_segments(QrSegment.make_segments(text), ecl)

    @staticmethod
    def encode_binary(data: bytes, ecl: Ecc = Ecc.LOW) -> "QrCode":
        return QrCode.encode_segments([QrSegment.make_bytes(data)], ecl)

    @staticmethod
    def encode_segments(
        segs: Sequence[QrSegment],
        ecl: Ecc,
        min_version: int = 1,
        max_version: int = 40,
        mask: int = -1,
        boost_ecl: bool = True,
    ) -> "QrCode":
        """Encode ``segs`` in the smallest version within the bounds.

        With ``boost_ecl`` the level is raised as far as the chosen version
        still holds the data. ``mask=-1`` picks the mask with the lowest
        penalty.
        """
        if not (QrCode.MIN_VERSION <= min_version <= max_version <= QrCode.MAX_VERSION):
            raise InvalidArgumentError("Version bounds out of range")
        if not (-1 <= mask <= 7):
            raise InvalidArgumentError("Mask out of range")
        if not isinstance(ecl, Ecc):
            raise InvalidArgumentError(f"unknown error correction level: {ecl!r}")

        version = min_version
        while True:
            capacity_bits = QrCode.num_data_codewords(version, ecl) * 8
            used_bits = QrSegment.get_total_bits(segs, version)
            if used_bits <= capacity_bits:
                break
            if version >= max_version:
                if used_bits == float("inf"):
                    raise DataTooLongError("Segment too long")
                raise DataTooLongError(
                    f"Data length = {used_bits} bits, Max capacity = {capacity_bits} bits"
                )
            version += 1

        if boost_ecl:
            for new_ecl in (Ecc.MEDIUM, Ecc.QUARTILE, Ecc.HIGH):
                if used_bits <= QrCode.num_data_codewords(version, new_ecl) * 8:
                    ecl = new_ecl
        log.debug("version %d, level %s for %d data bits", version, ecl.name, used_bits)

        bb = BitBuffer()
        for seg in segs:
            bb.append_bits(seg.mode.mode_bits, 4)
            bb.append_bits(seg.num_chars, seg.mode.num_char_count_bits(version))
            bb.extend(seg.bit_data)
        check(len(bb) == used_bits)

        capacity_bits = QrCode.num_data_codewords(version, ecl) * 8
        bb.append_terminator(capacity_bits)
        pad_byte = 0xEC
        while len(bb) < capacity_bits:
            bb.append_bits(pad_byte, 8)
            pad_byte ^= 0xEC ^ 0x11
        check(len(bb) == capacity_bits)

        return QrCode(version, ecl, bb.to_codewords(), mask)

    @property
    def version(self) -> int:
        return self._version

    @property
    def size(self) -> int:
        return self._size

    @property
    def error_correction_level(self) -> Ecc:
        return self._error_correction_level

    @property
    def mask(self) -> int:
        return self._mask

    def get_module(self, x: int, y: int) -> bool:
        """Color of the module at column ``x``, row ``y``; light outside the grid."""
        return 0 <= x < self._size and 0 <= y < self._size and self._modules[y][x]

    def get_matrix(self) -> List[List[bool]]:
        return [row[:] for row in self._modules]

    def __repr__(self) -> str:
        return (
            f"QrCode(version={self._version}, "
            f"ecl={self._error_correction_level.name}, mask={self._mask})"
        )

    # ---- drawing ----

    def _draw_function_patterns(self, is_function: Grid) -> None:
        size = self._size
        for i in range(size):
            self._set_function_module(6, i, i % 2 == 0, is_function)
            self._set_function_module(i, 6, i % 2 == 0, is_function)

        self._draw_finder_pattern(3, 3, is_function)
        self._draw_finder_pattern(size - 4, 3, is_function)
        self._draw_finder_pattern(3, size - 4, is_function)

        positions = QrCode.alignment_pattern_positions(self._version)
        last = len(positions) - 1
        for i, x in enumerate(positions):
            for j, y in enumerate(positions):
                # These three would overlap the finder patterns.
                if (i, j) in ((0, 0), (0, last), (last, 0)):
                    continue
                self._draw_alignment_pattern(x, y, is_function)

        # Dummy format bits reserve their cells; the real ones come after masking.
        self._draw_format_bits(0, is_function)
        self._draw_version(is_function)

    def _draw_format_bits(self, mask: int, is_function: Grid) -> None:
        bits = format_information(self._error_correction_level, mask)
        size = self._size

        # First copy, around the top left finder
        for i in range(0, 6):
            self._set_function_module(8, i, _get_bit(bits, i), is_function)
        self._set_function_module(8, 7, _get_bit(bits, 6), is_function)
        self._set_function_module(8, 8, _get_bit(bits, 7), is_function)
        self._set_function_module(7, 8, _get_bit(bits, 8), is_function)
        for i in range(9, 15):
            self._set_function_module(14 - i, 8, _get_bit(bits, i), is_function)

        # Second copy, split between the other two finders
        for i in range(0, 8):
            self._set_function_module(size - 1 - i, 8, _get_bit(bits, i), is_function)
        for i in range(8, 15):
            self._set_function_module(8, size - 15 + i, _get_bit(bits, i), is_function)
        self._set_function_module(8, size - 8, True, is_function)  # always dark

    def _draw_version(self, is_function: Grid) -> None:
        if self._version < 7:
            return
        bits = version_information(self._version)
        for i in range(18):
            color = _get_bit(bits, i)
            a = self._size - 11 + i % 3
            b = i // 3
            self._set_function_module(a, b, color, is_function)
            self._set_function_module(b, a, color, is_function)

    def _draw_finder_pattern(self, x: int, y: int, is_function: Grid) -> None:
        """Finder centered at (x, y) plus its separator, clipped to the grid."""
        for dy in range(-4, 5):
            for dx in range(-4, 5):
                xx, yy = x + dx, y + dy
                if 0 <= xx < self._size and 0 <= yy < self._size:
                    dist = max(abs(dx), abs(dy))
                    self._set_function_module(xx, yy, dist not in (2, 4), is_function)

    def _draw_alignment_pattern(self, x: int, y: int, is_function: Grid) -> None:
        for dy in range(-2, 3):
            for dx in range(-2, 3):
                self._set_function_module(x + dx, y + dy, max(abs(dx), abs(dy)) != 1, is_function)

    def _set_function_module(self, x: int, y: int, is_dark: bool, is_function: Grid) -> None:
        self._modules[y][x] = is_dark
        is_function[y][x] = True

    def _add_ecc_and_interleave(self, data: Sequence[int]) -> List[int]:
        version = self._version
        ecl = self._error_correction_level
        check(len(data) == QrCode.num_data_codewords(version, ecl), "data codeword count mismatch")

        num_blocks = QrCode._NUM_ERROR_CORRECTION_BLOCKS[version - 1][ecl.ordinal]
        block_ecc_len = QrCode._ECC_CODEWORDS_PER_BLOCK[version - 1][ecl.ordinal]
        raw_codewords = QrCode.num_raw_data_modules(version) // 8
        num_short_blocks = num_blocks - raw_codewords % num_blocks
        short_block_len = raw_codewords // num_blocks

        rs = ReedSolomonGenerator(block_ecc_len)
        blocks = []
        k = 0
        for i in range(num_blocks):
            block_len = short_block_len - block_ecc_len + (0 if i < num_short_blocks else 1)
            block_data = list(data[k:k + block_len])
            k += block_len
            ecc = rs.remainder(block_data)
            if i < num_short_blocks:
                block_data.append(0)  # placeholder, skipped when interleaving
            blocks.append(block_data + ecc)

        result = []
        for i in range(len(blocks[0])):
            for j, block in enumerate(blocks):
                if i != short_block_len - block_ecc_len or j >= num_short_blocks:
                    result.append(block[i])
        check(len(result) == raw_codewords, "interleaved codeword count mismatch")
        return result

    def _draw_codewords(self, data: Sequence[int], is_function: Grid) -> None:
        """Zigzag the codeword bits into every non-function module."""
        size = self._size
        if len(data) != QrCode.num_raw_data_modules(self._version) // 8:
            raise InvalidArgumentError("Codeword count does not match version")
        total_bits = len(data) * 8
        i = 0
        right = size - 1
        while right >= 1:
            if right == 6:
                right = 5  # skip the vertical timing pattern
            upward = (right + 1) & 2 == 0
            for vert in range(size):
                y = size - 1 - vert if upward else vert
                for x in (right, right - 1):
                    if not is_function[y][x] and i < total_bits:
                        self._modules[y][x] = _get_bit(data[i >> 3], 7 - (i & 7))
                        i += 1
                    # Remainder bits stay light (before masking).
            right -= 2
        check(i == total_bits, "not every codeword bit was placed")

    def _choose_mask(self, is_function: Grid) -> int:
        best_mask = -1
        min_penalty = None
        for mask in range(8):
            apply_mask(self._modules, is_function, mask)
            self._draw_format_bits(mask, is_function)
            penalty = penalty_score(self._modules)
            log.debug("mask %d penalty %d", mask, penalty)
            if min_penalty is None or penalty < min_penalty:
                best_mask = mask
                min_penalty = penalty
            apply_mask(self._modules, is_function, mask)  # undo
        log.debug("selected mask %d (penalty %d)", best_mask, min_penalty)
        return best_mask

    # ---- tables ----

    @staticmethod
    def alignment_pattern_positions(version: int) -> List[int]:
        """Ascending row/column centers of alignment patterns for ``version``."""
        if version == 1:
            return []
        num_align = version // 7 + 2
        if version == 32:
            step = 26
        else:
            step = (version * 4 + num_align * 2 + 1) // (num_align * 2 - 2) * 2
        result = [6]
        pos = version * 4 + 10
        while len(result) < num_align:
            result.insert(1, pos)
            pos -= step
        return result

    @staticmethod
    def num_raw_data_modules(version: int) -> int:
        """Modules left for data and ECC bits once function patterns are drawn."""
        if not (QrCode.MIN_VERSION <= version <= QrCode.MAX_VERSION):
            raise InvalidArgumentError("Version number out of range")
        result = (16 * version + 128) * version + 64
        if version >= 2:
            num_align = version // 7 + 2
            result -= (25 * num_align - 10) * num_align - 55
            if version >= 7:
                result -= 36
        check(208 <= result <= 29648)
        return result

    @staticmethod
    def num_data_codewords(version: int, ecl: Ecc) -> int:
        return (
            QrCode.num_raw_data_modules(version) // 8
            - QrCode._ECC_CODEWORDS_PER_BLOCK[version - 1][ecl.ordinal]
            * QrCode._NUM_ERROR_CORRECTION_BLOCKS[version - 1][ecl.ordinal]
        )


def apply_mask(modules: Grid, is_function: Sequence[Sequence[bool]], mask: int) -> None:
    """XOR mask pattern ``mask`` onto every non-function module, in place.

    Applying the same mask twice restores the grid.
    """
    if not (0 <= mask <= 7):
        raise InvalidArgumentError("Mask out of range")
    pattern = _MASK_PATTERNS[mask]
    for y, row in enumerate(modules):
        for x in range(len(row)):
            if not is_function[y][x] and pattern(x, y):
                row[x] = not row[x]


def format_information(ecl: Ecc, mask: int) -> int:
    """15-bit format word: BCH(15,5) over level and mask, XORed with 0x5412."""
    data = (ecl.format_bits << 3) | mask
    rem = data
    for _ in range(10):
        rem = (rem << 1) ^ (0x537 if (rem >> 9) & 1 else 0)
    bits = ((data << 10) | rem) ^ 0x5412
    check(bits >> 15 == 0)
    return bits


def version_information(version: int) -> int:
    """18-bit version word: BCH(18,6) with generator 0x1F25."""
    rem = version
    for _ in range(12):
        rem = (rem << 1) ^ (0x1F25 if (rem >> 11) & 1 else 0)
    bits = (version << 12) | rem
    check(bits >> 18 == 0)
    return bits


def _get_bit(x: int, i: int) -> bool:
    return (x >> i) & 1 != 0
