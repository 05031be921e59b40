import pytest

from raycube.colors import create_trgb
from raycube.errors import CubError
from raycube.gamemap import SpriteKind
from raycube.scene import (
    COIN_TEXTURE,
    SceneParser,
    load_scene,
    parse_scene,
    spawn_vectors,
)

ELEMENTS = [
    "R 640 480",
    "NO ./north.png",
    "SO ./south.png",
    "WE ./west.png",
    "EA ./east.png",
    "S ./sprite.png",
    "F 220,100,0",
    "C 225,30,0",
    "",
]

MAP = [
    "111111",
    "100001",
    "10N201",
    "111111",
]


def always(path):
    return True


def never(path):
    return False


def replace(lines, old_prefix, new_line):
    return [new_line if line.startswith(old_prefix) else line for line in lines]


def test_valid_scene():
    scene = parse_scene(ELEMENTS + MAP, exists=always)
    assert (scene.width, scene.height) == (640, 480)
    assert scene.north == "./north.png"
    assert scene.south == "./south.png"
    assert scene.west == "./west.png"
    assert scene.east == "./east.png"
    assert scene.sprite == "./sprite.png"
    assert scene.floor_colour == create_trgb(220, 100, 0)
    assert scene.ceiling_colour == create_trgb(225, 30, 0)
    assert scene.spawn == "N"
    assert scene.direction == spawn_vectors("N")
    assert len(scene.game_map.sprites) == 1
    assert scene.coin_texture is None


def test_validation_leaves_no_marks():
    scene = parse_scene(ELEMENTS + MAP, exists=always)
    assert all(value != 9 for row in scene.game_map.rows for value in row)
    assert scene.game_map.height == len(MAP)


def test_position_is_spawn_cell_centre():
    scene = parse_scene(ELEMENTS + MAP, exists=always)
    assert scene.position == (2.5, 2.5)


@pytest.mark.parametrize(
    "spawn, expected",
    [
        ("N", (0, -1, 0.66, 0)),
        ("E", (1, 0, 0, 0.66)),
        ("S", (0, 1, -0.66, 0)),
        ("W", (-1, 0, 0, -0.66)),
    ],
)
def test_spawn_vectors(spawn, expected):
    assert spawn_vectors(spawn) == pytest.approx(expected)


def test_spawn_vectors_unknown():
    with pytest.raises(ValueError):
        spawn_vectors("X")


def test_resolution_is_capped():
    lines = replace(ELEMENTS, "R ", "R 5000 3000") + MAP
    scene = parse_scene(lines, exists=always)
    assert (scene.width, scene.height) == (2560, 1440)


def test_resolution_with_leading_zero_is_invalid():
    lines = replace(ELEMENTS, "R ", "R 0640 480") + MAP
    with pytest.raises(CubError, match="Invalid resolution"):
        parse_scene(lines, exists=always)


def test_double_resolution():
    with pytest.raises(CubError, match="Multiple resolutions"):
        parse_scene(["R 640 480", "R 800 600"] + ELEMENTS[1:] + MAP, exists=always)


def test_missing_colour_component():
    lines = replace(ELEMENTS, "F ", "F 220,100") + MAP
    with pytest.raises(CubError, match="Invalid floorinput"):
        parse_scene(lines, exists=always)


def test_colour_out_of_range():
    lines = replace(ELEMENTS, "C ", "C 256,0,0") + MAP
    with pytest.raises(CubError, match="Invalid ceilinginput"):
        parse_scene(lines, exists=always)


def test_xpm_texture_rejected():
    lines = replace(ELEMENTS, "NO ", "NO ./north.xpm") + MAP
    with pytest.raises(CubError, match="XPM"):
        parse_scene(lines, exists=always)


def test_unopenable_texture():
    with pytest.raises(CubError, match="Invalid input for NO texture"):
        parse_scene(ELEMENTS + MAP, exists=never)


def test_wrong_tag():
    lines = replace(ELEMENTS, "NO ", "NOX ./north.png") + MAP
    with pytest.raises(CubError, match="Invalid input for NO texture"):
        parse_scene(lines, exists=always)


def test_open_map():
    open_map = ["111111", "100001", "10N201", "111101"]
    with pytest.raises(CubError, match="Invalid map"):
        parse_scene(ELEMENTS + open_map, exists=always)


def test_no_spawn():
    with pytest.raises(CubError, match="No spawnlocation"):
        parse_scene(ELEMENTS, exists=always)


def test_missing_resolution():
    with pytest.raises(CubError, match="No resolution"):
        parse_scene(ELEMENTS[1:] + MAP, exists=always)


def test_coin_rejected_without_bonus():
    coin_map = ["111111", "103001", "10N201", "111111"]
    with pytest.raises(CubError, match="Invalid character in map"):
        parse_scene(ELEMENTS + coin_map, exists=always)


def test_coin_accepted_with_bonus():
    coin_map = ["111111", "103001", "10N201", "111111"]
    scene = parse_scene(ELEMENTS + coin_map, bonus=True, exists=always)
    kinds = sorted(sprite.kind for sprite in scene.game_map.sprites)
    assert kinds == [SpriteKind.STANDARD, SpriteKind.COIN]
    assert scene.coin_texture == COIN_TEXTURE


def test_bonus_floor_texture():
    lines = replace(ELEMENTS, "F ", "F ./floor.png") + MAP
    scene = parse_scene(lines, bonus=True, exists=always)
    assert scene.floor_texture == "./floor.png"
    assert scene.floor_colour is None
    assert scene.ceiling_colour == create_trgb(225, 30, 0)


def test_bonus_floor_texture_missing_file():
    lines = replace(ELEMENTS, "F ", "F ./floor.png") + MAP

    def only_walls(path):
        return path != "./floor.png"

    with pytest.raises(CubError, match="Invalid floorinput"):
        parse_scene(lines, bonus=True, exists=only_walls)


def test_bonus_west_needs_space():
    lines = replace(ELEMENTS, "WE ", "WE./west.png") + MAP
    with pytest.raises(CubError, match="No input for WE texture"):
        parse_scene(lines, bonus=True, exists=always)


def test_parse_element_skips_leading_text():
    parser = SceneParser(exists=always)
    parser.parse_element("  NO ./north.png")
    assert parser.counts.north == 1
    assert parser.textures["north"] == "./north.png"


def test_texture_without_path_counts_twice():
    parser = SceneParser(exists=always)
    parser.parse_element("EA")
    assert parser.counts.east == 2
    assert "east" not in parser.textures


def test_feed_ignores_blank_map_lines():
    parser = SceneParser(exists=always)
    for line in ELEMENTS + ["   "] + MAP + [""]:
        parser.feed(line)
    assert parser.elements_complete
    assert parser.counts.map_rows == len(MAP)


def test_load_scene(tmp_path):
    names = {}
    for name in ("north", "south", "west", "east", "sprite"):
        texture = tmp_path / f"{name}.png"
        texture.write_bytes(b"")
        names[name] = str(texture)
    lines = [
        "R 640 480",
        f"NO {names['north']}",
        f"SO {names['south']}",
        f"WE {names['west']}",
        f"EA {names['east']}",
        f"S {names['sprite']}",
        "F 220,100,0",
        "C 225,30,0",
        "",
    ] + MAP
    scene_file = tmp_path / "level.cub"
    scene_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    scene = load_scene(scene_file)
    assert scene.north == names["north"]
    assert scene.sprite == names["sprite"]
    assert scene.game_map.height == len(MAP)


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(CubError, match="Invalid filename"):
        load_scene(tmp_path / "absent.cub")