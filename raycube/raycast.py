"""Frame buffer, textures and the wall, floor and ceiling ray casting."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, NamedTuple, Sequence, Union

import numpy as np
from PIL import Image

from raycube.colors import shade
from raycube.errors import CubError
from raycube.gamemap import WALL, GameMap

_MASK32 = 0xFFFFFFFF


class Frame:
    """A width x height buffer of 0xRRGGBB pixels, row 0 at the top."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"frame size {width}x{height} must be positive")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint32)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def put(self, x: int, y: int, colour: int) -> None:
        """Set one pixel; pixels outside the frame are ignored."""
        if self._inside(x, y):
            self.pixels[y, x] = colour & _MASK32

    def get(self, x: int, y: int) -> int:
        """The colour at (x, y); IndexError outside the frame."""
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the frame")
        return int(self.pixels[y, x])

    def rows(self) -> list[list[int]]:
        """All pixels as lists of colours, top row first."""
        return self.pixels.tolist()


@dataclass
class Texture:
    """An image as rows of 0xRRGGBB colours; fully transparent pixels are 0."""

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint32)
        if self.pixels.shape != (self.height, self.width):
            raise ValueError(
                f"pixel array of shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height}"
            )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "Texture":
        """Load an image file (PNG and the like)."""
        try:
            with Image.open(path) as image:
                rgba = np.asarray(image.convert("RGBA"), dtype=np.uint32)
        except OSError as exc:
            raise CubError(f"Couldn't load texture {os.fspath(path)}") from exc
        red, green, blue, alpha = (rgba[..., channel] for channel in range(4))
        pixels = np.where(alpha == 0, 0, (red << 16) | (green << 8) | blue)
        height, width = pixels.shape
        return cls(width, height, pixels)

    def sample(self, x: int, y: int) -> int:
        """The colour at (x, y), wrapping coordinates around the image."""
        return int(self.pixels[y % self.height, x % self.width])


@dataclass
class Camera:
    """Player position, view direction and camera plane."""

    posx: float
    posy: float
    dirx: float
    diry: float
    planex: float
    planey: float


class _RayHit(NamedTuple):
    distance: float
    side: int
    map_x: int
    map_y: int
    ray_dir_x: float
    ray_dir_y: float
    wall_x: float


Surface = Union[int, Texture]


def _step_and_side(pos: float, cell: int, ray_dir: float, delta: float) -> tuple[int, float]:
    if ray_dir < 0:
        return -1, (pos - cell) * delta
    return 1, (cell + 1.0 - pos) * delta


def cast_ray(game_map: GameMap, camera: Camera, x: int, width: int) -> _RayHit:
    """Follow the ray for screen column x until it hits a wall.

    Sides: 0 east-facing step, 1 west, 2 north, 3 south.
    """
    camera_x = 2 * x / width - 1
    ray_dir_x = camera.dirx + camera.planex * camera_x
    ray_dir_y = camera.diry + camera.planey * camera_x
    map_x = int(camera.posx)
    map_y = int(camera.posy)
    delta_x = abs(1 / ray_dir_x) if ray_dir_x else math.inf
    delta_y = abs(1 / ray_dir_y) if ray_dir_y else math.inf
    step_x, side_x = _step_and_side(camera.posx, map_x, ray_dir_x, delta_x)
    step_y, side_y = _step_and_side(camera.posy, map_y, ray_dir_y, delta_y)

    while True:
        if side_x < side_y:
            side = 1 if step_x < 0 else 0
            side_x += delta_x
            map_x += step_x
        else:
            side = 2 if step_y < 0 else 3
            side_y += delta_y
            map_y += step_y
        if game_map.cell(map_x, map_y) == WALL:
            break

    if side in (0, 1):
        distance = (map_x - camera.posx + (1 - step_x) / 2) / ray_dir_x
        wall_x = camera.posy + distance * ray_dir_y
    else:
        distance = (map_y - camera.posy + (1 - step_y) / 2) / ray_dir_y
        wall_x = camera.posx + distance * ray_dir_x
    wall_x -= math.floor(wall_x)
    return _RayHit(distance, side, map_x, map_y, ray_dir_x, ray_dir_y, wall_x)


def cast_walls(
    frame: Frame,
    game_map: GameMap,
    camera: Camera,
    textures: Mapping[str, Texture],
) -> list[float]:
    """Draw textured walls into frame and return the per-column wall distances.

    textures maps "north", "south", "east" and "west" to their Texture.
    """
    north = textures["north"]
    by_side = {0: textures["east"], 1: textures["west"], 2: north, 3: textures["south"]}
    height = frame.height
    zbuffer: list[float] = []
    for x in range(frame.width):
        hit = cast_ray(game_map, camera, x, frame.width)
        line_height = int(height / hit.distance) if hit.distance > 0 else height
        draw_start = max(-(line_height // 2) + height // 2, 0)
        draw_end = min(line_height // 2 + height // 2, height - 1)
        tex_x = int(hit.wall_x * north.width)
        if (hit.side in (0, 1) and hit.ray_dir_x > 0) or (
            hit.side in (2, 3) and hit.ray_dir_y < 0
        ):
            tex_x = north.width - tex_x - 1
        texture = by_side[hit.side]
        if line_height > 0:
            step = north.height / line_height
            tex_pos = (draw_start - height // 2 + line_height // 2) * step
            for y in range(draw_start, draw_end):
                tex_y = int(tex_pos) & (north.height - 1)
                tex_pos += step
                frame.put(x, y, shade(texture.sample(tex_x, tex_y), hit.distance))
        zbuffer.append(hit.distance)
    return zbuffer


def _surface_colour(surface: Surface, tx: int, ty: int) -> int:
    if isinstance(surface, Texture):
        return surface.sample(tx, ty)
    return surface


def cast_floor(frame: Frame, camera: Camera, floor: Surface, ceiling: Surface) -> None:
    """Fill the frame with the floor and ceiling, each a colour or a Texture."""
    width, height = frame.width, frame.height
    ray_x0 = camera.dirx - camera.planex
    ray_y0 = camera.diry - camera.planey
    ray_x1 = camera.dirx + camera.planex
    ray_y1 = camera.diry + camera.planey
    pos_z = 0.5 * height
    if isinstance(floor, Texture):
        coords: Texture | None = floor
    elif isinstance(ceiling, Texture):
        coords = ceiling
    else:
        coords = None

    for y in range(height):
        p = y - height // 2
        row_distance = pos_z / p if p else math.inf
        step_x = row_distance * (ray_x1 - ray_x0) / width
        step_y = row_distance * (ray_y1 - ray_y0) / width
        floor_x = camera.posx + row_distance * ray_x0
        floor_y = camera.posy + row_distance * ray_y0
        for x in range(width):
            tx = ty = 0
            if coords is not None and math.isfinite(floor_x) and math.isfinite(floor_y):
                tx = int(coords.width * (floor_x - int(floor_x))) & (coords.width - 1)
                ty = int(coords.height * (floor_y - int(floor_y))) & (coords.height - 1)
            floor_x += step_x
            floor_y += step_y
            frame.put(x, y, shade(_surface_colour(floor, tx, ty), row_distance))
            frame.put(
                x, height - y - 1, shade(_surface_colour(ceiling, tx, ty), row_distance)
            )