"""Heads-up display: the health bar, the knife overlay and the points counter."""

from __future__ import annotations

import math

from raycube.raycast import Frame, Texture

HEALTH_COLOUR = 0x0008A828
DAMAGE_COLOUR = 0x00A10808
BORDER_COLOUR = 0
BAR_LENGTH = 200
BORDER = 2
BAR_LEFT = 0.4
BAR_TOP = 0.94
BAR_BOTTOM = 0.95
KNIFE_TOP = 0.7


def _fill(frame: Frame, x0: int, x_limit: float, y0: int, y_limit: float, colour: int) -> None:
    """Fill integer pixels x0 <= x < x_limit, y0 <= y < y_limit."""
    for y in range(y0, math.ceil(y_limit)):
        for x in range(x0, math.ceil(x_limit)):
            frame.put(x, y, colour)


def draw_health_bar(frame: Frame, health: int) -> None:
    """Draw a 200-pixel bar near the bottom: green for health left, red for lost."""
    left = frame.width * BAR_LEFT
    top = frame.height * BAR_TOP
    bottom = frame.height * BAR_BOTTOM
    right = left + BAR_LENGTH
    x0 = int(left)
    filled_end = x0 + health * 2
    for y in range(int(top), int(bottom)):
        for x in range(x0, filled_end):
            frame.put(x, y, HEALTH_COLOUR)
        for x in range(max(x0, filled_end), math.ceil(right)):
            frame.put(x, y, DAMAGE_COLOUR)

    outer_left = int(left - BORDER)
    outer_right = right + BORDER + 1
    outer_top = int(top - BORDER)
    outer_bottom = bottom + BORDER + 1
    _fill(frame, outer_left, outer_right, outer_top, top, BORDER_COLOUR)
    _fill(frame, outer_left, outer_right, int(bottom + 1), outer_bottom, BORDER_COLOUR)
    _fill(frame, outer_left, left, outer_top, outer_bottom, BORDER_COLOUR)
    _fill(frame, int(right), outer_right, outer_top, outer_bottom, BORDER_COLOUR)


def draw_knife(frame: Frame, weapon: Texture) -> int:
    """Overlay the weapon image, centred, over the lower part of the frame.

    Pixels of colour 0 are transparent. Returns the number of pixels set.
    """
    pad_x = int((frame.width - weapon.width) / 2)
    start_y = int(KNIFE_TOP * frame.height)
    end_x = min(pad_x + weapon.width - 1, frame.width)
    drawn = 0
    for y in range(start_y, frame.height):
        tex_y = y - start_y
        for x in range(pad_x, end_x):
            colour = weapon.sample(x - pad_x, tex_y)
            if colour:
                frame.put(x, y, colour)
                drawn += 1
    return drawn


def format_points(points: int) -> str:
    """The points counter as shown on screen."""
    return str(int(points))