"""
Arcade host window for the tank duel

Translates key events into held-key sets, ticks the MatchController once
per frame and draws the returned snapshot. The simulation uses a
top-left origin; Arcade's origin is bottom-left, so every y is flipped.
"""

from __future__ import annotations

import logging
from typing import Optional, Set

import arcade

from .config import ENDLESS_ROUNDS, DEFAULT_MAX_ROUNDS, next_round_choice
from .entities import Facing, Side
from .match import MatchController
from .simulation import Phase, Snapshot, TankView

logger = logging.getLogger(__name__)

_KEY_NAMES = {
    arcade.key.LEFT: "left",
    arcade.key.RIGHT: "right",
    arcade.key.UP: "up",
    arcade.key.DOWN: "down",
    arcade.key.A: "a",
    arcade.key.D: "d",
    arcade.key.W: "w",
    arcade.key.S: "s",
    arcade.key.SPACE: "space",
}

_DIFFICULTY_KEYS = {
    arcade.key.KEY_1: 1,
    arcade.key.KEY_2: 2,
    arcade.key.KEY_3: 3,
}


class DuelWindow(arcade.Window):
    """Arcade window for playing or watching a duel"""

    def __init__(self, controller: MatchController, max_rounds: int = DEFAULT_MAX_ROUNDS,
                 interactive: bool = True):
        config = controller.config
        super().__init__(int(config.width), int(config.height), "Tank Duel - Arcade")
        self.controller = controller
        self.max_rounds = max_rounds
        self.interactive = interactive
        self.held: Set[str] = set()
        self.snapshot: Optional[Snapshot] = None

        # Colors
        self.GROUND_C = (34, 139, 34)
        self.HILL_C = (25, 102, 25)
        self.MOUNTAIN_C = (85, 85, 85)
        self.TRACK_C = (51, 51, 51)
        self.BARREL_C = (85, 85, 85)
        self.TANK_C = {Side.PLAYER: (0, 255, 0), Side.BOT: (255, 0, 0)}
        self.HUD_C = (235, 235, 235)

    # ----------------------------
    # Input
    # ----------------------------

    def on_key_press(self, symbol: int, modifiers: int):
        if not self.interactive:
            return
        name = _KEY_NAMES.get(symbol)
        if name:
            self.held.add(name)
            if name == "space":
                self.controller.press_fire()
            return

        phase = self.controller.phase
        if phase is Phase.MENU and symbol in _DIFFICULTY_KEYS:
            self.controller.start(_DIFFICULTY_KEYS[symbol], self.max_rounds)
        elif phase is Phase.MENU and symbol == arcade.key.E:
            self.max_rounds = next_round_choice(self.max_rounds)
        elif phase is Phase.GAME_OVER and symbol == arcade.key.R:
            self.controller.restart()
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, symbol: int, modifiers: int):
        name = _KEY_NAMES.get(symbol)
        if name:
            self.held.discard(name)

    def on_update(self, delta_time: float):
        if self.interactive:
            self.snapshot = self.controller.tick(self.held)

    # ----------------------------
    # Drawing
    # ----------------------------

    def _y(self, y: float) -> float:
        return self.height - y

    def _draw_ground(self):
        arcade.draw_lrbt_rectangle_filled(0, self.width, 0, self.height, self.GROUND_C)
        arcade.draw_triangle_filled(100, self._y(300), 250, self._y(100), 400, self._y(300), self.MOUNTAIN_C)
        arcade.draw_triangle_filled(500, self._y(350), 650, self._y(120), 750, self._y(350), self.MOUNTAIN_C)
        arcade.draw_ellipse_filled(200, self._y(500), 300, 160, self.HILL_C)
        arcade.draw_ellipse_filled(600, self._y(480), 240, 120, self.HILL_C)

    def _draw_tank(self, tank: TankView):
        left, top = tank.x, self._y(tank.y)
        right, bottom = left + tank.width, top - tank.height
        cx, cy = left + tank.width / 2, top - tank.height / 2

        arcade.draw_lrbt_rectangle_filled(left, right, bottom, top, self.TANK_C[tank.side])

        # Tracks run along the direction of travel
        if tank.facing in (Facing.LEFT, Facing.RIGHT):
            arcade.draw_lrbt_rectangle_filled(left, right, top, top + 5, self.TRACK_C)
            arcade.draw_lrbt_rectangle_filled(left, right, bottom - 5, bottom, self.TRACK_C)
        else:
            arcade.draw_lrbt_rectangle_filled(left - 5, left, bottom, top, self.TRACK_C)
            arcade.draw_lrbt_rectangle_filled(right, right + 5, bottom, top, self.TRACK_C)

        fx, fy = tank.facing.value
        arcade.draw_line(cx, cy, cx + fx * 25, cy - fy * 25, self.BARREL_C, 10)

        # Health bar
        fill = tank.width * min(1.0, tank.health / tank.max_health)
        color = (0, 255, 0) if tank.health > tank.max_health / 4 else (255, 0, 0)
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(left, left + fill, top + 5, top + 10, color)

    def _draw_hud(self, snap: Snapshot):
        rounds = "endless" if snap.endless else snap.max_rounds
        txt = (f"Player: {int(snap.player.health)}  "
               f"Bot: {int(snap.bot.health)}  "
               f"Round: {snap.round}/{rounds}  "
               f"Ball: {snap.weapon_name}")
        arcade.draw_text(txt, 12, self.height - 24, self.HUD_C, 14)

    def _draw_banner(self, lines):
        y = self.height / 2 + 20 * len(lines) / 2
        for line in lines:
            arcade.draw_text(line, self.width / 2, y, self.HUD_C, 18, anchor_x="center")
            y -= 30

    def on_draw(self):
        """Draw the current snapshot"""
        self.clear()
        snap = self.snapshot or self.controller.snapshot()
        self._draw_ground()

        if snap.player is not None:
            self._draw_tank(snap.player)
        if snap.bot is not None:
            self._draw_tank(snap.bot)

        if snap.phase is Phase.RUNNING:
            for p in snap.projectiles:
                if p.special:
                    arcade.draw_circle_filled(p.x, self._y(p.y), p.radius * 1.5, p.color + (136,))
                arcade.draw_circle_filled(p.x, self._y(p.y), p.radius, p.color)

            for p in snap.particles:
                alpha = int(255 * p.life_fraction)
                arcade.draw_lrbt_rectangle_filled(
                    p.x, p.x + p.size, self._y(p.y) - p.size, self._y(p.y), p.color + (alpha,)
                )
            self._draw_hud(snap)

        elif snap.phase is Phase.GAME_OVER and snap.result is not None:
            headline = "You Win!" if snap.result.winner is Side.PLAYER else "Game Over"
            self._draw_banner([headline, f"Score: {snap.result.score}", "Press R for the menu"])

        else:
            rounds = "endless" if self.max_rounds == ENDLESS_ROUNDS else self.max_rounds
            self._draw_banner([
                "TANK DUEL",
                "Press 1 / 2 / 3 to pick a difficulty",
                f"Rounds: {rounds} (E to change)",
                "Arrows/WASD move, Space fires",
            ])


def run_game(controller: MatchController, max_rounds: int = DEFAULT_MAX_ROUNDS):
    """Open the window and hand the frame loop to Arcade"""
    window = DuelWindow(controller, max_rounds=max_rounds)
    logger.info("Window opened at %dx%d", window.width, window.height)
    arcade.run()
