"""Cross-checks against the independent python-qrcode implementation."""

import pytest
import qrcode

from qrcode.base import rs_blocks
from qrcode.util import (
    MODE_8BIT_BYTE,
    MODE_ALPHA_NUM,
    MODE_NUMBER,
    QRData,
    BCH_type_info,
    BCH_type_number,
    pattern_position,
)

from qr_encoder import Ecc, QrCode, QrSegment
from qr_encoder.qrcodegen import format_information, version_information

ALL_ECC = [Ecc.LOW, Ecc.MEDIUM, Ecc.QUARTILE, Ecc.HIGH]


def _oracle_constant(ecl):
    # python-qrcode's ERROR_CORRECT_* constants are the 2-bit format values.
    return ecl.format_bits


@pytest.mark.parametrize("version", range(1, 41))
def test_alignment_positions_match(version):
    assert QrCode.alignment_pattern_positions(version) == list(pattern_position(version))


@pytest.mark.parametrize("ecl", ALL_ECC)
@pytest.mark.parametrize("mask", range(8))
def test_format_words_match(ecl, mask):
    assert format_information(ecl, mask) == BCH_type_info((ecl.format_bits << 3) | mask)


def test_version_words_match():
    for version in range(7, 41):
        assert version_information(version) == BCH_type_number(version)


@pytest.mark.parametrize("version", range(1, 41))
@pytest.mark.parametrize("ecl", ALL_ECC)
def test_block_structure_matches(version, ecl):
    blocks = rs_blocks(version, _oracle_constant(ecl))
    assert sum(b.data_count for b in blocks) == QrCode.num_data_codewords(version, ecl)
    assert len(blocks) == QrCode._NUM_ERROR_CORRECTION_BLOCKS[version - 1][ecl.ordinal]
    ecc_len = QrCode._ECC_CODEWORDS_PER_BLOCK[version - 1][ecl.ordinal]
    assert all(b.total_count - b.data_count == ecc_len for b in blocks)
    assert sum(b.total_count for b in blocks) == QrCode.num_raw_data_modules(version) // 8


CASES = [
    (b"hello, world", MODE_8BIT_BYTE, QrSegment.make_bytes, 1, Ecc.LOW, 0),
    (b"hello, world", MODE_8BIT_BYTE, QrSegment.make_bytes, 2, Ecc.HIGH, 5),
    (b"HELLO WORLD", MODE_ALPHA_NUM, QrSegment.make_alphanumeric, 1, Ecc.QUARTILE, 6),
    (b"0123456789012345", MODE_NUMBER, QrSegment.make_numeric, 1, Ecc.MEDIUM, 3),
    (bytes(range(100)), MODE_8BIT_BYTE, QrSegment.make_bytes, 7, Ecc.MEDIUM, 1),
    (b"QR CODE ORACLE " * 10, MODE_ALPHA_NUM, QrSegment.make_alphanumeric, 10, Ecc.QUARTILE, 4),
    (b"31415926535897932384626433832795" * 5, MODE_NUMBER, QrSegment.make_numeric, 14, Ecc.HIGH, 2),
    (b"The quick brown fox jumps over the lazy dog. " * 20, MODE_8BIT_BYTE, QrSegment.make_bytes, 27, Ecc.LOW, 7),
]


@pytest.mark.parametrize("data, oracle_mode, maker, version, ecl, mask", CASES)
def test_module_grid_matches(data, oracle_mode, maker, version, ecl, mask):
    """Same version, level and mask must produce the same symbol."""
    ref = qrcode.QRCode(version=version, error_correction=_oracle_constant(ecl), mask_pattern=mask)
    ref.add_data(QRData(data, mode=oracle_mode))
    ref.make(fit=False)
    expected = [[bool(cell) for cell in row] for row in ref.modules]

    seg = maker(data) if maker is QrSegment.make_bytes else maker(data.decode("ascii"))
    qr = QrCode.encode_segments([seg], ecl, version, version, mask=mask, boost_ecl=False)
    assert qr.get_matrix() == expected


@pytest.mark.parametrize("data, oracle_mode, maker, version, ecl, mask", CASES)
def test_cases_fit_their_version(data, oracle_mode, maker, version, ecl, mask):
    """Each fixed case must fit, or the grid comparison would never run."""
    seg = maker(data) if maker is QrSegment.make_bytes else maker(data.decode("ascii"))
    assert QrSegment.get_total_bits([seg], version) <= QrCode.num_data_codewords(version, ecl) * 8
