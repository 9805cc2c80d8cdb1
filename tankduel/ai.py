"""
Scripted opponent for the bot tank
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .config import AI_CONFIG
from .entities import Tank
from .utils import normalize, vec_len


def fire_cooldown_threshold(difficulty: int) -> float:
    """Seconds the bot waits between fire attempts; shrinks with difficulty"""
    return AI_CONFIG["base_fire_cooldown"] - difficulty * AI_CONFIG["cooldown_step"]


def engagement_range(difficulty: int) -> float:
    """Distance under which the bot opens fire; grows with difficulty"""
    return AI_CONFIG["base_range"] + difficulty * AI_CONFIG["range_step"]


def speed_factor(difficulty: int) -> float:
    return 0.8 + difficulty * 0.1


@dataclass(frozen=True)
class BotDecision:
    """Movement delta and fire intent for one tick"""
    dx: float
    dy: float
    fire: bool


class BotController:
    """Chases the player until in close range, fires when in reach.

    Lower difficulty tiers get noisy movement; higher tiers fire more
    often and from further away.
    """

    def __init__(self, pursuit_threshold: float = AI_CONFIG["pursuit_threshold"]):
        self.pursuit_threshold = pursuit_threshold

    def decide(self, bot: Tank, player: Tank, difficulty: int, now: float) -> BotDecision:
        to_x = player.x - bot.x
        to_y = player.y - bot.y
        dist = vec_len(to_x, to_y)

        dx, dy = 0.0, 0.0
        if dist > self.pursuit_threshold:
            nx, ny = normalize(to_x, to_y)
            step = bot.speed * speed_factor(difficulty)
            dx = nx * step
            dy = ny * step

            jitter = AI_CONFIG["jitter_tiers"] - difficulty
            if jitter > 0:
                dx += (random.random() - 0.5) * jitter
                dy += (random.random() - 0.5) * jitter

        fire = (
            now - bot.last_shot > fire_cooldown_threshold(difficulty)
            and dist < engagement_range(difficulty)
        )
        return BotDecision(dx=dx, dy=dy, fire=fire)
