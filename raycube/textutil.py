"""Small text helpers used when reading scene files and arguments."""

from __future__ import annotations

from typing import Iterable, Iterator

from raycube.errors import CubError

_WHITESPACE = frozenset(" \t\n\v\f\r")
_DIGITS = "0123456789"
_INT64_MAX = 2**63 - 1


def _wrap_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def split(text: str, sep: str) -> list[str]:
    """Split text on sep, dropping empty pieces."""
    return [piece for piece in text.split(sep) if piece]


def atoi(text: str) -> int:
    """Parse a leading integer the way C's atoi does, with 32-bit wrap-around.

    A value too large even for 64 bits yields -1 when positive and 0 when negative.
    """
    i = 0
    while i < len(text) and text[i] in _WHITESPACE:
        i += 1
    sign = 1
    if i < len(text) and text[i] in "+-":
        if text[i] == "-":
            sign = -1
        i += 1
    result = 0
    while i < len(text) and text[i] in _DIGITS:
        result = result * 10 + int(text[i])
        if result > _INT64_MAX:
            return (-sign - 1) // 2
        i += 1
    return _wrap_int32(_wrap_int32(result) * sign)


def is_number(text: str, allow_leading_zero: bool) -> bool:
    """True when text is a non-empty run of digits.

    Without allow_leading_zero a first character of '0' is rejected.
    """
    if not text or not all(char in _DIGITS for char in text):
        return False
    return allow_leading_zero or text[0] != "0"


def leading_digits(text: str) -> int:
    """Value of the digits at the start of text, or 0 when there are none."""
    end = 0
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    return atoi(text[:end]) if end else 0


def is_empty_line(line: str) -> bool:
    """True when the line holds nothing but spaces."""
    return line.strip(" ") == ""


def read_lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield lines without their newline.

    A final empty line is yielded when the input ends with a newline or is
    empty, matching how the scene reader consumes its last read.
    """
    ended_with_newline = True
    for raw in stream:
        if raw.endswith("\n"):
            yield raw[:-1]
            ended_with_newline = True
        else:
            yield raw
            ended_with_newline = False
    if ended_with_newline:
        yield ""


def contains_extension(name: str, ext: str) -> bool:
    """True when the extension (with its dot) appears anywhere in name."""
    if not ext.startswith("."):
        ext = "." + ext
    return ext in name


def parse_save_flag(arg: str) -> bool:
    """Accept only the --save option; anything else is an error."""
    if arg != "--save":
        raise CubError("Invalid parameter after filename")
    return True