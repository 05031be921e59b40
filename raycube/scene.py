"""Reading scene description (.cub) files into a validated Scene."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Iterable

from raycube.colors import create_trgb, valid_colour_component
from raycube.errors import INVALID, CubError, ElementCounts
from raycube.gamemap import GameMap
from raycube.textutil import (
    atoi,
    contains_extension,
    is_empty_line,
    is_number,
    leading_digits,
    read_lines,
    split,
)

MAX_WIDTH = 2560
MAX_HEIGHT = 1440
COIN_TEXTURE = "./img/coin.png"
PLANE = 0.66

_DIGITS = "0123456789"

_SPAWN_VECTORS = {
    "N": (0.0, -1.0, PLANE, 0.0),
    "E": (1.0, 0.0, 0.0, PLANE),
    "S": (0.0, 1.0, -PLANE, 0.0),
    "W": (-1.0, 0.0, 0.0, -PLANE),
}

# Texture elements in the order a line position is tested for them.
_TEXTURE_TAGS = (("NO", "north"), ("EA", "east"), ("SO", "south"), ("WE", "west"))


def spawn_vectors(spawn: str) -> tuple[float, float, float, float]:
    """Direction and camera plane (dirx, diry, planex, planey) for a spawn letter."""
    try:
        return _SPAWN_VECTORS[spawn]
    except KeyError:
        raise ValueError(f"unknown spawn direction {spawn!r}") from None


def _can_open(path: str) -> bool:
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


@dataclass
class Scene:
    """Everything a scene file describes."""

    width: int
    height: int
    north: str
    south: str
    east: str
    west: str
    sprite: str
    game_map: GameMap
    floor_colour: int | None = None
    ceiling_colour: int | None = None
    floor_texture: str | None = None
    ceiling_texture: str | None = None
    coin_texture: str | None = None
    bonus: bool = False

    @property
    def spawn(self) -> str:
        assert self.game_map.spawn is not None
        return self.game_map.spawn

    @property
    def position(self) -> tuple[float, float]:
        """Starting position of the player, in map units."""
        return self.game_map.spawn_x, self.game_map.spawn_y

    @property
    def direction(self) -> tuple[float, float, float, float]:
        """Starting (dirx, diry, planex, planey) of the player."""
        return spawn_vectors(self.spawn)


class SceneParser:
    """Consumes scene lines one at a time and builds a Scene."""

    def __init__(self, bonus: bool = False, exists: Callable[[str], bool] | None = None) -> None:
        self.bonus = bonus
        self.exists = exists if exists is not None else _can_open
        self.counts = ElementCounts()
        self.game_map = GameMap(bonus=bonus)
        self.width = 0
        self.height = 0
        self.textures: dict[str, str] = {}
        self.floor_colour: int | None = None
        self.ceiling_colour: int | None = None
        self.floor_texture: str | None = None
        self.ceiling_texture: str | None = None

    @property
    def elements_complete(self) -> bool:
        """True once every element has been seen at least once."""
        c = self.counts
        return all(
            (c.resolution, c.north, c.east, c.south, c.west, c.floor, c.ceiling, c.sprite)
        )

    def feed(self, line: str) -> None:
        """Handle one line: an element until all are seen, then a map row."""
        if not self.elements_complete:
            self.parse_element(line)
        elif not is_empty_line(line):
            self.counts.map_rows += 1
            self.game_map.add_row(line)

    def parse_element(self, line: str) -> None:
        """Find the first element identifier in line and parse that element."""
        for i, char in enumerate(line):
            if char == "R":
                self._resolution(line)
                return
            if self._path(line, i):
                return
            if char == "F":
                self.counts.floor += 1
                self._surface(line, "F")
                return
            if char == "C":
                self.counts.ceiling += 1
                self._surface(line, "C")
                return

    def _resolution(self, line: str) -> None:
        self.counts.resolution += 1
        if self.counts.resolution > 1:
            raise CubError("Multiple resolutions")
        parts = split(line, " ")
        if parts[0] != "R":
            raise CubError("Invalid resolution")
        if len(parts) >= 3:
            if is_number(parts[1], False):
                self.width = min(leading_digits(parts[1]), MAX_WIDTH)
                self.counts.resolution += 1
            if is_number(parts[2], False):
                self.height = min(leading_digits(parts[2]), MAX_HEIGHT)
                self.counts.resolution += 1

    def _path(self, line: str, i: int) -> bool:
        for tag, attr in _TEXTURE_TAGS:
            if line.startswith(tag, i):
                if tag == "WE" and self.bonus and line[i + 2 : i + 3] != " ":
                    continue
                self._texture(line, tag, attr, f"Invalid input for {tag} texture")
                return True
        if line[i] == "S" and line[i + 1 : i + 2] != "O":
            self._texture(line, "S", "sprite", "Invalid input for sprite texture")
            return True
        return False

    def _bump(self, attr: str) -> None:
        setattr(self.counts, attr, getattr(self.counts, attr) + 1)

    def _texture(self, line: str, tag: str, attr: str, message: str) -> None:
        self._bump(attr)
        parts = split(line, " ")
        if parts[0] != tag:
            raise CubError(message)
        if len(parts) > 1:
            self.textures[attr] = parts[1]
            self._check_file(parts[1], attr)
        else:
            self._bump(attr)

    def _check_file(self, path: str, attr: str) -> None:
        if contains_extension(path, ".xpm"):
            raise CubError("I don't accept XPM files")
        if not self.exists(path):
            setattr(self.counts, attr, INVALID)

    def _surface(self, line: str, tag: str) -> None:
        is_floor = tag == "F"
        label = "floorinput" if is_floor else "ceilinginput"
        count_attr = "floor" if is_floor else "ceiling"
        parts = split(line, " ")
        if parts[0] != tag:
            raise CubError(f"Invalid {label}")
        if len(parts) < 2:
            raise CubError(f"No {label}" if self.bonus else f"Invalid {label}")
        value = parts[1]
        if self.bonus and value[0] not in _DIGITS:
            if is_floor:
                self.floor_texture = value
            else:
                self.ceiling_texture = value
            self._check_file(value, count_attr)
            return
        colour = self._colour(value, getattr(self.counts, count_attr), label)
        if is_floor:
            self.floor_colour = colour
            self.floor_texture = None
        else:
            self.ceiling_colour = colour
            self.ceiling_texture = None

    @staticmethod
    def _colour(text: str, count: int, label: str) -> int:
        components = split(text, ",")
        if len(components) < 3 or count != 1:
            raise CubError(f"Invalid {label}")
        rgb = components[:3]
        if not all(valid_colour_component(part) for part in rgb):
            raise CubError(f"Invalid {label}")
        try:
            return create_trgb(*(atoi(part) for part in rgb))
        except ValueError:
            raise CubError(f"Invalid {label}") from None

    def finish(self) -> Scene:
        """Validate everything read so far and return the Scene."""
        if self.counts.map_rows > 0:
            self.game_map.validate()
            self.game_map.reset()
        self.counts.spawns = self.game_map.spawn_count
        self.counts.check(self.game_map.spawn)
        return Scene(
            width=self.width,
            height=self.height,
            north=self.textures["north"],
            south=self.textures["south"],
            east=self.textures["east"],
            west=self.textures["west"],
            sprite=self.textures["sprite"],
            game_map=self.game_map,
            floor_colour=self.floor_colour,
            ceiling_colour=self.ceiling_colour,
            floor_texture=self.floor_texture,
            ceiling_texture=self.ceiling_texture,
            coin_texture=COIN_TEXTURE if self.bonus else None,
            bonus=self.bonus,
        )


def parse_scene(
    lines: Iterable[str],
    bonus: bool = False,
    exists: Callable[[str], bool] | None = None,
) -> Scene:
    """Parse scene lines (with or without newlines) into a Scene."""
    parser = SceneParser(bonus, exists)
    for line in read_lines(lines):
        parser.feed(line)
    return parser.finish()


def load_scene(path: str | os.PathLike[str], bonus: bool = False) -> Scene:
    """Read and parse the scene file at path."""
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise CubError("Invalid filename") from exc
    with handle:
        return parse_scene(handle, bonus)