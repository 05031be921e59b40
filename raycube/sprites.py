"""Sprite distances, pick-ups and their projection onto the screen."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from raycube.colors import shade
from raycube.gamemap import EMPTY, GameMap, Sprite, SpriteKind
from raycube.raycast import Camera, Frame, Texture

SCREAM_SOUND = "./sound/scream.wav"
SLICE_SOUND = "./sound/slice.wav"
COIN_SOUND = "./sound/mariocoin.wav"

ENCOUNTER_RANGE = 3
ATTACK_RANGE = 1
DAMAGE = 2
COIN_RANGE = 0.4
COIN_POINTS = 10
REMOVED = 1000.0
"""Coordinate and distance given to a sprite that has been cut down."""

COIN_SCALE = 3
COIN_LIFT = 128


@dataclass
class SpriteEvents:
    """What happened while updating sprites for one frame."""

    sounds: list[str] = field(default_factory=list)
    damage: int = 0
    points: int = 0


def update_sprites(
    sprites: Sequence[Sprite],
    posx: float,
    posy: float,
    game_map: GameMap,
    bonus: bool,
    attacking: bool,
) -> SpriteEvents:
    """Recompute distances from the player and apply encounters and pick-ups."""
    events = SpriteEvents()
    for sprite in sprites:
        sprite.distance = math.hypot(posx - sprite.x, posy - sprite.y)
        if sprite.distance < ENCOUNTER_RANGE and sprite.encounters < 1:
            sprite.encounters = 1
        if sprite.distance > ENCOUNTER_RANGE:
            sprite.encounters = 0

        if sprite.kind == SpriteKind.STANDARD and sprite.distance < ENCOUNTER_RANGE:
            if sprite.encounters == 1 and bonus:
                events.sounds.append(SCREAM_SOUND)
            if sprite.distance < ATTACK_RANGE and bonus:
                events.damage += DAMAGE
            if sprite.distance < ATTACK_RANGE and attacking and bonus:
                events.sounds.append(SLICE_SOUND)
                game_map.rows[int(sprite.y)][int(sprite.x)] = EMPTY
                sprite.x = sprite.y = sprite.distance = REMOVED
            sprite.encounters += 1

        if sprite.distance < COIN_RANGE and sprite.kind == SpriteKind.COIN:
            events.sounds.append(COIN_SOUND)
            events.points += COIN_POINTS
            sprite.x = sprite.y = 0.0
            sprite.distance = REMOVED
    return events


@dataclass
class Projection:
    """Where a sprite lands on the screen."""

    transform_x: float
    transform_y: float
    screen_x: int
    sprite_height: int
    sprite_width: int
    start_y: int
    end_y: int
    start_x: int
    end_x: int
    v_offset: int


def _tdiv(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def project_sprite(sprite: Sprite, camera: Camera, width: int, height: int) -> Projection:
    """Transform a sprite into camera space and compute its screen rectangle.

    Coins are drawn at a third of the size and lowered towards the floor.
    """
    det = camera.planex * camera.diry - camera.dirx * camera.planey
    if det == 0:
        raise ValueError("camera direction and plane are parallel")
    inv_det = 1.0 / det
    rel_x = sprite.x - camera.posx
    rel_y = sprite.y - camera.posy
    transform_x = inv_det * (camera.diry * rel_x - camera.dirx * rel_y)
    transform_y = inv_det * (-camera.planey * rel_x + camera.planex * rel_y)
    if transform_y == 0:
        return Projection(transform_x, transform_y, 0, 0, 0, 0, 0, 0, 0, 0)

    coin = sprite.kind == SpriteKind.COIN
    scale = COIN_SCALE if coin else 1
    v_offset = int(COIN_LIFT / transform_y) if coin else 0
    screen_x = int((width // 2) * (1 + transform_x / transform_y))
    size = abs(int(height / transform_y))
    sprite_height = size // scale
    sprite_width = size // scale
    start_y = max(-(sprite_height // 2) + height // 2 + v_offset, 0)
    end_y = min(sprite_height // 2 + height // 2 + v_offset, height - 1)
    start_x = max(-(sprite_width // 2) + screen_x, 0)
    end_x = min(sprite_width // 2 + screen_x, width - 1)
    return Projection(
        transform_x,
        transform_y,
        screen_x,
        sprite_height,
        sprite_width,
        start_y,
        end_y,
        start_x,
        end_x,
        v_offset,
    )


def draw_sprite(
    frame: Frame,
    sprite: Sprite,
    camera: Camera,
    zbuffer: Sequence[float],
    texture: Texture,
) -> int:
    """Draw a sprite behind nearer walls; returns the number of pixels set.

    Texture pixels of colour 0 are treated as transparent.
    """
    proj = project_sprite(sprite, camera, frame.width, frame.height)
    if proj.transform_y <= 0 or proj.sprite_width == 0 or proj.sprite_height == 0:
        return 0
    left = -(proj.sprite_width // 2) + proj.screen_x
    drawn = 0
    for stripe in range(proj.start_x, proj.end_x):
        if not (0 < stripe < frame.width and proj.transform_y < zbuffer[stripe]):
            continue
        tex_x = _tdiv(_tdiv(256 * (stripe - left) * texture.width, proj.sprite_width), 256)
        for y in range(proj.start_y + 1, proj.end_y):
            d = (y - proj.v_offset) * 256 - frame.height * 128 + proj.sprite_height * 128
            tex_y = _tdiv(_tdiv(d * texture.height, proj.sprite_height), 256)
            colour = texture.sample(tex_x, tex_y)
            if colour != 0:
                frame.put(stripe, y, shade(colour, sprite.distance))
                drawn += 1
    return drawn