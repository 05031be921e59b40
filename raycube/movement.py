"""Keyboard state and player movement through the map."""

from __future__ import annotations

import math
from dataclasses import dataclass

from raycube.gamemap import EMPTY, GameMap
from raycube.raycast import Camera

KEY_A = 0
KEY_S = 1
KEY_D = 2
KEY_W = 13
KEY_SPACE = 49
KEY_ESCAPE = 53
KEY_LEFT = 123
KEY_RIGHT = 124

MOVE_SPEED = 0.08
ROT_SPEED = 0.06
LOOK_AHEAD = 0.5

_KEY_FIELDS = {
    KEY_W: "w",
    KEY_A: "a",
    KEY_S: "s",
    KEY_D: "d",
    KEY_LEFT: "left",
    KEY_RIGHT: "right",
    KEY_SPACE: "space",
}


@dataclass
class Keys:
    """Which of the game's keys are held down."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    left: bool = False
    right: bool = False
    space: bool = False

    def press(self, code: int) -> bool:
        """Mark a key as held; True when it was not held before."""
        name = _KEY_FIELDS.get(code)
        if name is None:
            return False
        was_down = getattr(self, name)
        setattr(self, name, True)
        return not was_down

    def release(self, code: int) -> None:
        """Mark a key as released; unknown codes are ignored."""
        name = _KEY_FIELDS.get(code)
        if name is not None:
            setattr(self, name, False)

    def any_movement(self) -> bool:
        """True when a walking or turning key is held."""
        return any((self.w, self.s, self.a, self.d, self.left, self.right))


def _walkable(game_map: GameMap, x: float, y: float) -> bool:
    try:
        return game_map.cell(int(x), int(y)) == EMPTY
    except IndexError:
        return False


@dataclass
class Player:
    """Position, facing and camera plane of the player."""

    posx: float
    posy: float
    dirx: float
    diry: float
    planex: float
    planey: float
    move_speed: float = MOVE_SPEED
    rot_speed: float = ROT_SPEED

    def move(self, keys: Keys, game_map: GameMap) -> None:
        """Walk and strafe according to the held keys, stopping at non-floor cells."""
        speed = self.move_speed
        if keys.w:
            if _walkable(game_map, self.posx + self.dirx * LOOK_AHEAD, self.posy):
                self.posx += self.dirx * speed
            if _walkable(game_map, self.posx, self.posy + self.diry * LOOK_AHEAD):
                self.posy += self.diry * speed
        if keys.s:
            if _walkable(game_map, self.posx - self.dirx * LOOK_AHEAD, self.posy):
                self.posx -= self.dirx * speed
            if _walkable(game_map, self.posx, self.posy - self.diry * LOOK_AHEAD):
                self.posy -= self.diry * speed
        if keys.a:
            if _walkable(game_map, self.posx, self.posy - self.planey * LOOK_AHEAD):
                self.posy -= self.dirx * speed
            if _walkable(game_map, self.posx - self.planex * LOOK_AHEAD, self.posy):
                self.posx += self.diry * speed
        if keys.d:
            if _walkable(game_map, self.posx, self.posy + self.planey * LOOK_AHEAD):
                self.posy += self.dirx * speed
            if _walkable(game_map, self.posx + self.planex * LOOK_AHEAD, self.posy):
                self.posx -= self.diry * speed

    def rotate(self, angle: float) -> None:
        """Turn the view direction and camera plane by angle radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self.dirx, self.diry = (
            self.dirx * cos_a - self.diry * sin_a,
            self.dirx * sin_a + self.diry * cos_a,
        )
        self.planex, self.planey = (
            self.planex * cos_a - self.planey * sin_a,
            self.planex * sin_a + self.planey * cos_a,
        )

    def camera(self) -> Camera:
        """A snapshot of the player's view for rendering."""
        return Camera(self.posx, self.posy, self.dirx, self.diry, self.planex, self.planey)