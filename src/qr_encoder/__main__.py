"""Command line interface printing a QR Code module grid as text."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import generator
from .errors import QrEncodeError


def _mask_arg(value: str) -> int:
    if value == "auto":
        return -1
    try:
        mask = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("mask must be 'auto' or 0-7") from exc
    if not 0 <= mask <= 7:
        raise argparse.ArgumentTypeError("mask must be 'auto' or 0-7")
    return mask


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qr_encoder", description="Encode data as a QR Code module grid")
    data_group = parser.add_mutually_exclusive_group(required=True)
    data_group.add_argument("--text", help="Literal text/URL to encode")
    data_group.add_argument("--file", type=Path, help="Encode the raw bytes of a file")

    parser.add_argument("--ecc", choices=["low", "medium", "quartile", "high"], default="medium", help="Error correction level")
    parser.add_argument("--min-version", type=int, default=1, help="Smallest allowed version (1-40)")
    parser.add_argument("--max-version", type=int, default=40, help="Largest allowed version (1-40)")
    parser.add_argument("--mask", type=_mask_arg, default=-1, help="Mask pattern 0-7 or 'auto'")
    parser.add_argument("--no-boost", action="store_true", help="Keep the requested ECC level even if a higher one fits")
    parser.add_argument("--border", type=int, default=4, help="Quiet-zone width in modules")
    parser.add_argument("--dark", default="#", help="Character for dark modules")
    parser.add_argument("--light", default=".", help="Character for light modules")
    parser.add_argument("-o", "--output", type=Path, help="Write the grid to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log encoder decisions")
    return parser


def render_text(matrix: Sequence[Sequence[bool]], dark: str = "#", light: str = ".") -> str:
    return "".join("".join(dark if value else light for value in row) + "\n" for row in matrix)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = dict(
        min_version=args.min_version,
        max_version=args.max_version,
        mask=args.mask,
        boost_ecl=not args.no_boost,
    )
    try:
        if args.file is not None:
            qr = generator.encode_bytes(args.file.read_bytes(), ecc=args.ecc, **options)
        else:
            qr = generator.encode_text(args.text, ecc=args.ecc, **options)
    except QrEncodeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    text = render_text(generator.add_border(qr, args.border), args.dark, args.light)
    if args.output is not None:
        args.output.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    print(
        f"version {qr.version} ({qr.size}x{qr.size}), ecc {qr.error_correction_level.name}, mask {qr.mask}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
