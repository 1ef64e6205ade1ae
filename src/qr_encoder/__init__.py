"""Pure Python QR Code symbol encoder."""

from .errors import DataTooLongError, InvalidArgumentError, InvariantError, QrEncodeError
from .generator import matrix_from_bytes, matrix_from_text
from .qrcodegen import Ecc, QrCode
from .segments import Mode, QrSegment

__all__ = [
    "DataTooLongError",
    "Ecc",
    "InvalidArgumentError",
    "InvariantError",
    "Mode",
    "QrCode",
    "QrEncodeError",
    "QrSegment",
    "matrix_from_bytes",
    "matrix_from_text",
]
