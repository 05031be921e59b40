"""The grid of cells read from a scene file, its sprites and its validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from raycube.errors import CubError

EMPTY = 0
WALL = 1
SPRITE = 2
VOID = 8
VISITED = 9

SPAWN_CHARS = frozenset("NESW")
_BASE_CHARS = frozenset("012 NESW")
_BONUS_CHARS = _BASE_CHARS | {"3"}

FLOOD_LIMIT = 80000
"""Open cells the validity check may visit before the map counts as too big."""

_NEIGHBOURS = (
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


class SpriteKind(IntEnum):
    """What a sprite on the map stands for."""

    STANDARD = 1
    COIN = 2


@dataclass
class Sprite:
    """A sprite centred in its map cell."""

    x: float
    y: float
    kind: SpriteKind = SpriteKind.STANDARD
    distance: float = 0.0
    encounters: int = 0


def is_valid_char(char: str, bonus: bool) -> bool:
    """True when char may appear in a map row; '3' (a coin) only with bonus."""
    return char in (_BONUS_CHARS if bonus else _BASE_CHARS)


def sort_sprites(sprites: list[Sprite]) -> list[Sprite]:
    """Order sprites in place from farthest to nearest and return the list."""
    sprites.sort(key=lambda sprite: sprite.distance, reverse=True)
    return sprites


@dataclass
class GameMap:
    """Rows of cells: 0 floor, 1 wall, 2 sprite, 8 void (a space)."""

    bonus: bool = False
    rows: list[list[int]] = field(default_factory=list)
    sprites: list[Sprite] = field(default_factory=list)
    spawn: str | None = None
    spawn_x: float = 0.0
    spawn_y: float = 0.0
    spawn_count: int = 0

    @property
    def height(self) -> int:
        return len(self.rows)

    def add_row(self, line: str) -> None:
        """Append one map line, recording the spawn point and sprites in it."""
        y = len(self.rows)
        row: list[int] = []
        self.rows.append(row)
        for char in line:
            if not is_valid_char(char, self.bonus):
                raise CubError("Invalid character in map")
            x = len(row)
            if char in SPAWN_CHARS:
                self.spawn = char
                self.spawn_x = x + 0.5
                self.spawn_y = y + 0.5
                self.spawn_count += 1
                char = "0"
            if char == " ":
                row.append(VOID)
            elif char == "2":
                row.append(SPRITE)
                self.sprites.append(Sprite(x + 0.5, y + 0.5, SpriteKind.STANDARD))
            elif char == "3":
                row.append(EMPTY)
                self.sprites.append(Sprite(x + 0.5, y + 0.5, SpriteKind.COIN))
            else:
                row.append(int(char))

    def cell(self, x: int, y: int) -> int:
        """The value at column x of row y; IndexError outside the map."""
        if not 0 <= y < len(self.rows):
            raise IndexError(f"row {y} is outside the map")
        row = self.rows[y]
        if not 0 <= x < len(row):
            raise IndexError(f"column {x} is outside row {y}")
        return row[x]

    def _beyond_next_row(self, x: int, y: int) -> bool:
        return y + 1 < len(self.rows) and x >= len(self.rows[y + 1])

    def validate(self) -> None:
        """Flood-fill from the spawn point and raise CubError if it escapes.

        Reached floor cells are marked 9; call reset() to turn them back.
        """
        if self.spawn is None:
            raise CubError("No spawnlocation")
        last = len(self.rows) - 1
        stack: list[tuple[int, int]] = [(int(self.spawn_x), int(self.spawn_y))]
        visited = 0
        while stack:
            x, y = stack.pop()
            if not 0 <= y < len(self.rows) or not 0 <= x < len(self.rows[y]):
                raise CubError("Invalid map")
            value = self.rows[y][x]
            if value in (EMPTY, VOID):
                visited += 1
                if visited > FLOOD_LIMIT:
                    raise CubError("Map is too big")
                if value == VOID:
                    raise CubError("Invalid map")
                if x == 0 or y == 0 or y == last or self._beyond_next_row(x, y):
                    raise CubError("Invalid map")
                self.rows[y][x] = VISITED
                stack.extend((x + dx, y + dy) for dx, dy in _NEIGHBOURS)
            elif value == SPRITE and self._beyond_next_row(x, y):
                raise CubError("Invalid map")

    def reset(self) -> None:
        """Turn cells marked by validate() back into floor."""
        for row in self.rows:
            row[:] = [EMPTY if value == VISITED else value for value in row]

    @classmethod
    def from_lines(cls, lines: Iterable[str], bonus: bool = False) -> "GameMap":
        """Build a map from its lines."""
        game_map = cls(bonus=bonus)
        for line in lines:
            game_map.add_row(line)
        return game_map