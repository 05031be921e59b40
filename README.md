# raycube

A small first-person raycaster. It reads a `.cub` scene file that
describes the screen resolution, the wall and sprite textures, the floor
and ceiling and a grid map. Then it either opens a pygame window where you
can walk around the map, or renders one frame to a BMP file.

## Installing

```
pip install .
```

## Running

```
raycube maps/level.cub
```

To render a single frame into `screenshot.bmp` in the current directory
and exit instead of opening a window:

```
raycube maps/level.cub --save
```

To turn on bonus mode (coins, a health bar, a points counter, floor and
ceiling textures, attacking and sounds), add `--bonus` anywhere on the
command line:

```
raycube maps/level.cub --bonus
```

Besides `--bonus`, the command takes the scene file and at most one more
argument, which must be `--save`. A scene file whose name does not contain
`.cub` is rejected. On any problem the command prints `ERROR` followed by
a description and exits with status 1.

## Controls

| Key          | Action                                 |
|--------------|----------------------------------------|
| W / S        | walk forward / back                    |
| A / D        | strafe left / right                    |
| Left / Right | turn                                   |
| Space        | attack (bonus mode only)               |
| Escape       | quit                                   |

Closing the window also quits.

## Scene files

A scene file lists its elements first, one per line, in any order, and the
map after them:

```
R 1280 720
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
S ./textures/sprite.png
F 220,100,0
C 225,30,0

        1111111111111
        1000000000001
        1011000001111
111111111011000001001
100000000011000001001
101100000111002001001
100100000000000000001
11111111110110101N001
        1111111111111
```

* `R` sets the resolution. Both numbers must be plain digits without a
  leading zero; the width is capped at 2560 and the height at 1440.
* `NO`, `SO`, `WE`, `EA` and `S` give texture paths. Textures are loaded
  with Pillow, so PNG and the other formats it reads work; a path that
  contains `.xpm` is refused, and a path that cannot be opened is an error.
  In sprite textures, black (and fully transparent) pixels are not drawn.
* `F` and `C` give the floor and ceiling colours as `R,G,B`, each one to
  three digits and 0–255. In bonus mode a value that does not start with
  a digit is taken as a texture path instead.
* Each element may appear only once.
* Once every element has been read, each non-blank line is a map row: `1`
  is a wall, `0` an open cell, `2` a sprite, a space is outside the map,
  and exactly one of `N`, `S`, `E`, `W` marks the spawn point and the
  direction the player faces. In bonus mode `3` places a coin.

The map must be closed: every open cell reachable from the spawn point
(including diagonally) must be enclosed by walls, not touch the map's
edge, and not reach a space. A map whose enclosed area exceeds 80,000
cells is rejected as too big.

## Bonus mode

* Walking over a coin scores 10 points; reaching 100 points ends the game
  with `yay 100 points`.
* Standing within one cell of a sprite costs 2 health per frame; at 0 the
  game ends with `You are dead`. Holding Space while that close cuts the
  sprite down.
* A health bar is drawn near the bottom of the frame and the points are
  shown in the window.
* The coin texture is read from `./img/coin.png`, and sounds from
  `./sound/`, relative to the current directory.

## Using it as a library

```python
from raycube.scene import load_scene
from raycube.app import Game

scene = load_scene("maps/level.cub", bonus=False)
game = Game(scene, bonus=False)
game.render()
game.save_screenshot("frame.bmp")
```

Other pieces that can be used on their own:

* `raycube.scene.parse_scene(lines, bonus, exists)` parses an iterable of
  lines instead of a path; `exists` decides whether a texture path counts
  as openable.
* `raycube.gamemap.GameMap` holds the grid, its sprites and the spawn
  point, and `validate()` runs the closed-map check.
* `raycube.raycast` has the `Frame` buffer of `0xRRGGBB` pixels, `Texture`,
  `Camera`, and `cast_floor` / `cast_walls`; `raycube.sprites` projects and
  draws sprites; `raycube.hud` draws the health bar and has `draw_knife`
  for overlaying a weapon image.
* `raycube.bmp.write_bmp(path, rows, width, height)` writes rows of
  `0xRRGGBB` pixels as a 24-bit BMP.

All scene and output problems are raised as `raycube.errors.CubError`.

## Limitations

* Sounds are played by starting the `afplay` command in the background.
  Where that command is not available, the game runs silently.
* The knife overlay is available as `raycube.hud.draw_knife` but the game
  itself does not draw it.
* The points counter appears only in the window, not in saved screenshots.

## Tests

```
pip install .[test]
pytest
```