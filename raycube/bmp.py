"""Writing frames as 24-bit uncompressed BMP files."""

from __future__ import annotations

import os
import struct
from typing import Sequence

from raycube.errors import CubError

HEADER_SIZE = 54
INFO_HEADER_SIZE = 40
BITS_PER_PIXEL = 24


def _padding(width: int) -> int:
    return (4 - (width * 3) % 4) % 4


def bmp_header(width: int, height: int) -> bytes:
    """The 54-byte file and info header for a width x height 24-bit image."""
    file_size = HEADER_SIZE + width * 3 * height + _padding(width) * height
    return struct.pack(
        "<2sIIIIiiHH24x",
        b"BM",
        file_size & 0xFFFFFFFF,
        0,
        HEADER_SIZE,
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        BITS_PER_PIXEL,
    )


def encode_bmp(rows: Sequence[Sequence[int]], width: int, height: int) -> bytes:
    """Encode rows of 0xRRGGBB colours, given top row first, as a BMP file."""
    if len(rows) != height:
        raise ValueError(f"expected {height} rows, got {len(rows)}")
    pad = b"\x00" * _padding(width)
    body = bytearray(bmp_header(width, height))
    for row in reversed(rows):
        if len(row) != width:
            raise ValueError(f"expected rows of {width} pixels, got {len(row)}")
        for colour in row:
            body += (colour & 0xFFFFFFFF).to_bytes(4, "little")[:3]
        body += pad
    return bytes(body)


def write_bmp(path: str | os.PathLike[str], rows: Sequence[Sequence[int]], width: int, height: int) -> None:
    """Write rows to path as a BMP file."""
    data = encode_bmp(rows, width, height)
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise CubError(f"Couldn't create/open {os.fspath(path)}") from exc