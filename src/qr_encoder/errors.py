"""Exceptions raised while building QR Code symbols."""

from __future__ import annotations


class QrEncodeError(Exception):
    """Base class for every error raised by :mod:`qr_encoder`."""


class InvalidArgumentError(QrEncodeError, ValueError):
    """A parameter is malformed or out of range."""


class DataTooLongError(QrEncodeError, ValueError):
    """The payload does not fit in any allowed version at the requested level."""


class InvariantError(QrEncodeError, AssertionError):
    """An internal consistency check failed. Indicates a bug, not bad input."""


def check(condition: bool, message: str = "internal invariant violated") -> None:
    if not condition:
        raise InvariantError(message)
