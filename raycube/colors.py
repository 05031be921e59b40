"""Colour packing and distance shading."""

from __future__ import annotations

_CHANNEL = 0xFF
_MASK32 = 0xFFFFFFFF
_DIGITS = frozenset("0123456789")


def create_trgb(r: int, g: int, b: int) -> int:
    """Pack three 0-255 channels into a 0xRRGGBB integer."""
    for name, value in (("red", r), ("green", g), ("blue", b)):
        if not 0 <= value <= 255:
            raise ValueError(f"{name} component {value} is outside 0-255")
    return r << 16 | g << 8 | b


def shade(colour: int, distance: float) -> int:
    """Fade a colour towards black the further away it is.

    At a distance of zero the colour is returned unchanged (without alpha);
    beyond roughly 2.86 units every channel collapses to 2.
    """
    colour &= _MASK32
    r = (colour >> 16) & _CHANNEL
    g = (colour >> 8) & _CHANNEL
    b = colour & _CHANNEL
    multi = min(0.7 * (distance / 2), 1.0)
    r, g, b = (int(multi * 2 + (1 - multi) * channel) for channel in (r, g, b))
    return (r << 16 | g << 8 | b) & _MASK32


def valid_colour_component(text: str) -> bool:
    """True when text holds at most three ASCII digits and nothing else."""
    return all(char in _DIGITS for char in text) and len(text) <= 3