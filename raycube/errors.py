"""Scene errors and the bookkeeping used to validate scene elements."""

from __future__ import annotations

from dataclasses import dataclass


class CubError(Exception):
    """A fatal problem with the scene, the arguments or an output file."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


INVALID = 10
"""Count stored for an element whose texture file could not be opened."""


@dataclass
class ElementCounts:
    """How often each scene element has been seen, and its validity markers."""

    resolution: int = 0
    north: int = 0
    south: int = 0
    east: int = 0
    west: int = 0
    floor: int = 0
    ceiling: int = 0
    sprite: int = 0
    floor_colour: int = 0
    ceiling_colour: int = 0
    spawns: int = 0
    map_rows: int = 0

    def check(self, spawn: str | None) -> None:
        """Raise CubError for the first missing or invalid element."""
        missing = (
            (self.resolution, "No resolution"),
            (self.north, "No input for NO texture"),
            (self.east, "No input for EA texture"),
            (self.south, "No input for SO texture"),
            (self.west, "No input for WE texture"),
            (self.floor, "No floor input"),
            (self.ceiling, "No ceiling input"),
            (self.sprite, "No sprite input"),
        )
        for count, message in missing:
            if count == 0:
                raise CubError(message)
        if spawn is None:
            raise CubError("No spawnlocation")

        if self.resolution != 3:
            raise CubError("Invalid resolution")
        for count, label in (
            (self.north, "NO"),
            (self.east, "EA"),
            (self.south, "SO"),
            (self.west, "WE"),
        ):
            if count > 1:
                raise CubError(f"Invalid input for {label} texture")
        if self.floor_colour < 0 or self.floor < 0 or self.floor == INVALID:
            raise CubError("Invalid floorinput")
        if self.ceiling_colour < 0 or self.ceiling < 0 or self.ceiling == INVALID:
            raise CubError("Invalid ceilinginput")
        if self.sprite > 1:
            raise CubError("Invalid sprite input")
        if self.spawns > 1:
            raise CubError("Double spawnlocation")