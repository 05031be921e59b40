import math

import numpy as np
import pytest

from raycube.colors import shade
from raycube.gamemap import GameMap, Sprite, SpriteKind
from raycube.raycast import Camera, Frame, Texture
from raycube.sprites import (
    COIN_POINTS,
    COIN_SCALE,
    COIN_SOUND,
    DAMAGE,
    REMOVED,
    SCREAM_SOUND,
    SLICE_SOUND,
    draw_sprite,
    project_sprite,
    update_sprites,
)

ROOM = ["11111", "10201", "10001", "10001", "11111"]


def room() -> GameMap:
    return GameMap.from_lines(ROOM)


def east_camera() -> Camera:
    return Camera(2.5, 2.5, 1.0, 0.0, 0.0, 0.66)


def solid(colour: int, size: int = 4) -> Texture:
    return Texture(size, size, np.full((size, size), colour, dtype=np.uint32))


def test_update_computes_distance():
    sprite = Sprite(2.5, 2.5)
    update_sprites([sprite], 0.5, 2.5, room(), False, False)
    assert sprite.distance == pytest.approx(2.0)


def test_scream_only_on_first_encounter():
    sprite = Sprite(2.5, 2.5)
    game_map = room()
    first = update_sprites([sprite], 0.5, 2.5, game_map, True, False)
    second = update_sprites([sprite], 0.5, 2.5, game_map, True, False)
    assert first.sounds == [SCREAM_SOUND]
    assert SCREAM_SOUND not in second.sounds


def test_no_events_without_bonus():
    sprite = Sprite(2.5, 2.5)
    events = update_sprites([sprite], 2.5, 2.8, room(), False, True)
    assert events.sounds == []
    assert events.damage == 0
    assert sprite.x == 2.5


def test_damage_when_close():
    sprite = Sprite(2.5, 2.5)
    events = update_sprites([sprite], 2.5, 3.0, room(), True, False)
    assert events.damage == DAMAGE


def test_attack_removes_sprite():
    game_map = room()
    sprite = game_map.sprites[0]
    events = update_sprites([sprite], 2.5, 2.0, game_map, True, True)
    assert SLICE_SOUND in events.sounds
    assert game_map.cell(2, 1) == 0
    assert sprite.x == REMOVED
    assert sprite.distance == REMOVED


def test_far_sprite_resets_encounters():
    sprite = Sprite(2.5, 2.5, encounters=5)
    update_sprites([sprite], 2.5, 7.5, room(), True, False)
    assert sprite.encounters == 0


def test_coin_collected_when_near():
    coin = Sprite(2.5, 2.5, SpriteKind.COIN)
    events = update_sprites([coin], 2.6, 2.5, room(), True, False)
    assert events.points == COIN_POINTS
    assert COIN_SOUND in events.sounds
    assert coin.x == 0
    assert coin.distance == REMOVED


def test_coin_not_collected_from_afar():
    coin = Sprite(2.5, 2.5, SpriteKind.COIN)
    events = update_sprites([coin], 1.5, 2.5, room(), True, False)
    assert events.points == 0
    assert coin.x == 2.5


def test_project_sprite_straight_ahead():
    camera = east_camera()
    sprite = Sprite(4.5, 2.5)
    proj = project_sprite(sprite, camera, 320, 200)
    assert proj.transform_x == pytest.approx(0.0)
    assert proj.transform_y == pytest.approx(sprite.x - camera.posx)
    assert proj.screen_x == 320 // 2
    assert proj.start_x <= proj.screen_x <= proj.end_x


def test_coin_projection_is_smaller_and_lowered():
    camera = east_camera()
    standard = project_sprite(Sprite(4.5, 2.5), camera, 320, 200)
    coin = project_sprite(Sprite(4.5, 2.5, SpriteKind.COIN), camera, 320, 200)
    assert coin.sprite_height == standard.sprite_height // COIN_SCALE
    assert coin.v_offset > 0
    assert coin.end_y > standard.end_y - standard.sprite_height // 2


def test_project_rejects_degenerate_camera():
    with pytest.raises(ValueError):
        project_sprite(Sprite(1.5, 1.5), Camera(2.5, 2.5, 1.0, 0.0, 1.0, 0.0), 10, 10)


def test_draw_sprite_visible():
    frame = Frame(32, 32)
    sprite = Sprite(4.5, 2.5)
    sprite.distance = 2.0
    drawn = draw_sprite(frame, sprite, east_camera(), [math.inf] * 32, solid(0x00AA00))
    assert drawn > 0
    assert frame.get(16, 16) == shade(0x00AA00, sprite.distance)


def test_draw_sprite_hidden_behind_wall():
    frame = Frame(32, 32)
    sprite = Sprite(4.5, 2.5)
    drawn = draw_sprite(frame, sprite, east_camera(), [1.0] * 32, solid(0x00AA00))
    assert drawn == 0
    assert all(pixel == 0 for row in frame.rows() for pixel in row)


def test_draw_sprite_behind_camera():
    frame = Frame(32, 32)
    sprite = Sprite(1.5, 2.5)
    drawn = draw_sprite(frame, sprite, east_camera(), [math.inf] * 32, solid(0x00AA00))
    assert drawn == 0
    assert all(pixel == 0 for row in frame.rows() for pixel in row)


def test_draw_sprite_transparent_texture():
    frame = Frame(32, 32)
    drawn = draw_sprite(frame, Sprite(4.5, 2.5), east_camera(), [math.inf] * 32, solid(0))
    assert drawn == 0
    assert all(pixel == 0 for row in frame.rows() for pixel in row)