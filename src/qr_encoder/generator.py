"""Convenience helpers returning plain boolean matrices."""

from __future__ import annotations

from typing import Any, List

from .qrcodegen import Ecc, QrCode
from .segments import QrSegment

_ECC_LEVELS = {
    "low": Ecc.LOW,
    "medium": Ecc.MEDIUM,
    "quartile": Ecc.QUARTILE,
    "high": Ecc.HIGH,
}


def ecc_from_name(name: str) -> Ecc:
    try:
        return _ECC_LEVELS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"unknown ECC level: {name}") from exc


def encode_text(text: str, ecc: str = "medium", **options: Any) -> QrCode:
    """Encode ``text``; ``options`` go to :meth:`QrCode.encode_segments`."""
    return QrCode.encode_segments(QrSegment.make_segments(text), ecc_from_name(ecc), **options)


def encode_bytes(data: bytes, ecc: str = "medium", **options: Any) -> QrCode:
    return QrCode.encode_segments([QrSegment.make_bytes(data)], ecc_from_name(ecc), **options)


def matrix_from_text(text: str, ecc: str = "medium", border: int = 4, **options: Any) -> List[List[bool]]:
    """Encode ``text`` into a matrix of booleans with a ``border`` module quiet zone."""
    return add_border(encode_text(text, ecc, **options), border)


def matrix_from_bytes(data: bytes, ecc: str = "medium", border: int = 4, **options: Any) -> List[List[bool]]:
    return add_border(encode_bytes(data, ecc, **options), border)


def add_border(qr: QrCode, border: int) -> List[List[bool]]:
    border = max(border, 0)
    new_size = qr.size + border * 2
    return [
        [qr.get_module(x - border, y - border) for x in range(new_size)]
        for y in range(new_size)
    ]
