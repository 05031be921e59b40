"""The game object, the window loop and the command-line entry point."""

from __future__ import annotations

import os
import subprocess
import sys
from typing import Sequence

import numpy as np

from raycube.bmp import write_bmp
from raycube.errors import CubError
from raycube.gamemap import SpriteKind, sort_sprites
from raycube.hud import draw_health_bar, format_points
from raycube.movement import (
    KEY_A,
    KEY_D,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_SPACE,
    KEY_W,
    Keys,
    Player,
)
from raycube.raycast import Frame, Texture, cast_floor, cast_walls
from raycube.scene import COIN_TEXTURE, Scene, load_scene
from raycube.sprites import SLICE_SOUND, draw_sprite, update_sprites
from raycube.textutil import contains_extension, parse_save_flag

WINDOW_TITLE = "raycube"
MUSIC = "./sound/scarymusic.wav"
SCREENSHOT_PATH = "screenshot.bmp"
START_HEALTH = 100
WINNING_POINTS = 100
DEAD_MESSAGE = "You are dead"
WIN_MESSAGE = "yay 100 points"
POINTS_COLOUR = (0, 255, 0)


def play_sound(path: str | os.PathLike[str]) -> subprocess.Popen | None:
    """Start playing a sound in the background; None when no player is available."""
    try:
        return subprocess.Popen(
            ["afplay", os.fspath(path)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError:
        return None


class Game:
    """A running game: the scene, its textures, the player and the score."""

    def __init__(self, scene: Scene, bonus: bool = False) -> None:
        self.scene = scene
        self.bonus = bonus
        self.game_map = scene.game_map
        self.textures = {
            "north": Texture.from_file(scene.north),
            "south": Texture.from_file(scene.south),
            "east": Texture.from_file(scene.east),
            "west": Texture.from_file(scene.west),
        }
        self.sprite_texture = Texture.from_file(scene.sprite)
        self.coin_texture = (
            Texture.from_file(scene.coin_texture or COIN_TEXTURE) if bonus else None
        )
        self.floor = self._surface(scene.floor_texture, scene.floor_colour)
        self.ceiling = self._surface(scene.ceiling_texture, scene.ceiling_colour)
        posx, posy = scene.position
        self.player = Player(posx, posy, *scene.direction)
        self.keys = Keys()
        self.health = START_HEALTH
        self.points = 0
        self.frame: Frame | None = None
        self.outcome: str | None = None
        self._sounds: list[subprocess.Popen] = []

    @staticmethod
    def _surface(texture: str | None, colour: int | None) -> Texture | int:
        if texture:
            return Texture.from_file(texture)
        return colour if colour is not None else 0

    def _play(self, path: str) -> None:
        process = play_sound(path)
        if process is not None:
            self._sounds.append(process)

    def _stop_sounds(self) -> None:
        for process in self._sounds:
            if process.poll() is None:
                process.terminate()
        self._sounds.clear()

    def render(self) -> Frame:
        """Draw a new frame, applying sprite encounters and pick-ups on the way."""
        frame = Frame(self.scene.width, self.scene.height)
        camera = self.player.camera()
        cast_floor(frame, camera, self.floor, self.ceiling)
        zbuffer = cast_walls(frame, self.game_map, camera, self.textures)

        sprites = self.game_map.sprites
        events = update_sprites(
            sprites, camera.posx, camera.posy, self.game_map, self.bonus, self.keys.space
        )
        for sound in events.sounds:
            self._play(sound)
        self.health -= events.damage
        self.points += events.points
        if self.health <= 0:
            self.outcome = DEAD_MESSAGE

        sort_sprites(sprites)
        for sprite in sprites:
            texture = self.sprite_texture
            if sprite.kind == SpriteKind.COIN and self.coin_texture is not None:
                texture = self.coin_texture
            draw_sprite(frame, sprite, camera, zbuffer, texture)

        if self.bonus:
            draw_health_bar(frame, self.health)
        if self.points == WINNING_POINTS and self.outcome is None:
            self.outcome = WIN_MESSAGE
        self.frame = frame
        return frame

    def tick(self) -> bool:
        """Move and turn for held keys and re-render; False when nothing was held."""
        if not self.keys.any_movement():
            return False
        self.player.move(self.keys, self.game_map)
        if self.keys.left:
            self.player.rotate(-self.player.rot_speed)
        if self.keys.right:
            self.player.rotate(self.player.rot_speed)
        self.render()
        return True

    def save_screenshot(self, path: str | os.PathLike[str] = SCREENSHOT_PATH) -> None:
        """Write the current frame (rendering one if needed) as a BMP file."""
        frame = self.frame if self.frame is not None else self.render()
        write_bmp(path, frame.rows(), frame.width, frame.height)

    def _key_down(self, code: int) -> bool:
        """Handle a key press; False when the game should quit."""
        if code == KEY_ESCAPE:
            return False
        if code == KEY_SPACE:
            if self.bonus and not self.keys.space:
                self.keys.press(code)
                self._play(SLICE_SOUND)
            return True
        self.keys.press(code)
        return True

    def _key_up(self, code: int) -> None:
        self.keys.release(code)

    def _run_window(self) -> str | None:
        """Show the game in a window until it is closed or ends; returns the outcome."""
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        key_map = {
            pygame.K_w: KEY_W,
            pygame.K_a: KEY_A,
            pygame.K_s: KEY_S,
            pygame.K_d: KEY_D,
            pygame.K_LEFT: KEY_LEFT,
            pygame.K_RIGHT: KEY_RIGHT,
            pygame.K_SPACE: KEY_SPACE,
            pygame.K_ESCAPE: KEY_ESCAPE,
        }
        pygame.init()
        try:
            screen = pygame.display.set_mode((self.scene.width, self.scene.height))
            pygame.display.set_caption(WINDOW_TITLE)
            font = pygame.font.Font(None, 36) if self.bonus else None
            clock = pygame.time.Clock()

            def present() -> None:
                assert self.frame is not None
                pixels = self.frame.pixels
                rgb = np.dstack(
                    ((pixels >> 16) & 0xFF, (pixels >> 8) & 0xFF, pixels & 0xFF)
                ).astype(np.uint8)
                screen.blit(pygame.surfarray.make_surface(rgb.swapaxes(0, 1)), (0, 0))
                if font is not None:
                    text = font.render(format_points(self.points), True, POINTS_COLOUR)
                    screen.blit(
                        text, (self.scene.width // 2, int(self.scene.height * 0.1))
                    )
                pygame.display.flip()

            self.render()
            present()
            if self.bonus:
                self._play(MUSIC)
            running = True
            while running and self.outcome is None:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        code = key_map.get(event.key)
                        if code is not None and not self._key_down(code):
                            running = False
                    elif event.type == pygame.KEYUP:
                        code = key_map.get(event.key)
                        if code is not None:
                            self._key_up(code)
                if running and self.tick():
                    present()
                clock.tick(60)
        finally:
            self._stop_sounds()
            pygame.quit()
        return self.outcome


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game: SCENE.cub [--save] [--bonus]."""
    args = list(sys.argv[1:] if argv is None else argv)
    bonus = "--bonus" in args
    args = [arg for arg in args if arg != "--bonus"]
    try:
        if not 1 <= len(args) <= 2:
            raise CubError("Invalid runcommand")
        screenshot = len(args) == 2 and parse_save_flag(args[1])
        if not contains_extension(args[0], ".cub"):
            raise CubError("Invalid filetype")
        game = Game(load_scene(args[0], bonus), bonus)
        if screenshot:
            game.render()
            if game.outcome:
                print(game.outcome)
                return 0
            print("Saving screenshot...")
            game.save_screenshot(SCREENSHOT_PATH)
            print("Screenshot saved!")
            return 0
        outcome = game._run_window()
    except CubError as exc:
        print("ERROR")
        print(exc)
        return 1
    if outcome:
        print(outcome)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())