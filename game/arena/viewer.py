"""
Arcade window that draws the arena read-only, plus a keyboard-driven game loop.

World coordinates grow downwards; Arcade's grow upwards, so every y is flipped.

Play:
    python -m game.arena.viewer
"""

from __future__ import annotations

import argparse
from typing import Optional, Set, Tuple

import numpy as np
import arcade

from .entities import EntityKind, ObstacleKind
from .orchestrator import PlayerInput, new_world, reset_round, tick
from .utils import normalize
from .world import World

Color = Tuple[int, int, int]

OBSTACLE_COLORS = {
    ObstacleKind.DESK: (189, 189, 189),
    ObstacleKind.CUBICLE: (144, 202, 249),
    ObstacleKind.WATER_COOLER: (255, 224, 130),
}


def hex_to_rgb(value: str) -> Color:
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class ArenaWindow(arcade.Window):
    """Arcade window for rendering an arena world"""

    def __init__(self, world: World, visible: bool = True, title: str = "Office Arena"):
        super().__init__(world.width, world.height, title, visible=visible)
        self.world = world

        # Colors
        self.BG = (238, 238, 238)
        self.PLAYER_C = (25, 118, 210)
        self.MANAGER_C = (66, 66, 66)
        self.HAZARD_C = (120, 60, 160)
        self.HEALTH_BG = (211, 47, 47)
        self.HEALTH_FG = (102, 187, 106)
        self.HUD_C = (33, 33, 33)

    def _y(self, y: float) -> float:
        return self.world.height - y

    def _health_bar(self, x: float, y: float, radius: float, frac: float):
        bar_w, bar_h = 36, 5
        top = self._y(y - radius - 12)
        arcade.draw_lrbt_rectangle_filled(x - bar_w / 2, x + bar_w / 2, top - bar_h, top, self.HEALTH_BG)
        if frac > 0:
            arcade.draw_lrbt_rectangle_filled(
                x - bar_w / 2, x - bar_w / 2 + bar_w * frac, top - bar_h, top, self.HEALTH_FG
            )

    def on_draw(self):
        """Draw the current world state"""
        self.clear()
        arcade.set_background_color(self.BG)
        world = self.world

        for o in world.obstacles:
            arcade.draw_lrbt_rectangle_filled(
                o.x, o.x + o.w, self._y(o.y + o.h), self._y(o.y), OBSTACLE_COLORS[o.kind]
            )

        for item in world.resting_items():
            arcade.draw_circle_filled(item.x, self._y(item.y), item.radius, hex_to_rgb(item.spec.color))

        for proj in world.projectiles:
            color = hex_to_rgb(proj.owner.color) if proj.owner.kind is EntityKind.BOT else self.PLAYER_C
            arcade.draw_circle_filled(proj.x, self._y(proj.y), proj.radius, color)

        hazard = world.hazard
        if hazard is not None:
            arcade.draw_circle_filled(hazard.x, self._y(hazard.y), 30, self.HAZARD_C)

        for ent in world.live_combatants():
            color = self.PLAYER_C if ent is world.player else hex_to_rgb(ent.color)
            # Wobble: shift sideways for a few frames after a hit
            dx = 2 if ent.wobble % 2 else 0
            arcade.draw_circle_filled(ent.x + dx, self._y(ent.y), ent.radius, color)
            self._health_bar(ent.x, ent.y, ent.radius, ent.health / ent.max_health)

        mgr = world.manager
        if mgr is not None and mgr.alive:
            arcade.draw_circle_filled(mgr.x, self._y(mgr.y), mgr.radius, self.MANAGER_C)
            self._health_bar(mgr.x, mgr.y, mgr.radius, mgr.health / mgr.max_health)

        # Text HUD
        player = world.player
        txt = (f"Kills: {world.kills}  "
               f"HP: {player.health if player.alive else 0}  "
               f"Items: {len(player.inventory)}  "
               f"Tick: {world.tick_count}")
        arcade.draw_text(txt, 12, self.height - 24, self.HUD_C, 14)
        if world.events.message:
            arcade.draw_text(world.events.message, self.width / 2, self.height - 48,
                             self.HUD_C, 16, anchor_x="center")
        if world.round_over:
            arcade.draw_text("Manager defeated! Press R to play again", self.width / 2,
                             self.height / 2, self.HUD_C, 22, anchor_x="center")

    def capture(self) -> np.ndarray:
        """Draw once and return the frame as an RGB array (height, width, 3)"""
        self.switch_to()
        self.on_draw()
        image = arcade.get_image(0, 0, self.width, self.height)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)


class PlayWindow(ArenaWindow):
    """Keyboard-controlled game: WASD / arrows to move, space to throw, R to restart"""

    MOVE_KEYS = {
        arcade.key.W: (0, -1), arcade.key.UP: (0, -1),
        arcade.key.S: (0, 1), arcade.key.DOWN: (0, 1),
        arcade.key.A: (-1, 0), arcade.key.LEFT: (-1, 0),
        arcade.key.D: (1, 0), arcade.key.RIGHT: (1, 0),
    }

    def __init__(self, world: World):
        super().__init__(world, visible=True)
        self.set_update_rate(1 / 60)
        self._held: Set[int] = set()

    def on_key_press(self, symbol: int, modifiers: int):
        self._held.add(symbol)
        if symbol == arcade.key.R and self.world.round_over:
            reset_round(self.world)

    def on_key_release(self, symbol: int, modifiers: int):
        self._held.discard(symbol)

    def current_input(self) -> PlayerInput:
        mx = my = 0.0
        for key in self._held:
            if key in self.MOVE_KEYS:
                kx, ky = self.MOVE_KEYS[key]
                mx += kx
                my += ky
        mx, my = normalize(mx, my)
        return PlayerInput(mx, my, arcade.key.SPACE in self._held)

    def on_update(self, delta_time: float):
        tick(self.world, self.current_input())


def play(seed: Optional[int] = None):
    world = new_world(seed=seed)
    PlayWindow(world)
    arcade.run()
    return world.result


def main():
    parser = argparse.ArgumentParser(description="Play the office arena with the keyboard")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for a reproducible round")
    args = parser.parse_args()

    result = play(seed=args.seed)
    if result is not None:
        print(f"Final score: {result.score} kills in {result.elapsed_ticks} ticks (won={result.won})")


if __name__ == "__main__":
    main()
