"""
Game entity dataclasses
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .config import PARTICLE_CONFIG, MatchConfig, WeaponProfile
from .utils import clamp


class Side(Enum):
    """Which tank an entity or projectile belongs to"""
    PLAYER = "player"
    BOT = "bot"

    @property
    def opponent(self) -> "Side":
        return Side.BOT if self is Side.PLAYER else Side.PLAYER


class Facing(Enum):
    """Barrel direction, valued by its unit vector"""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


@dataclass
class Projectile:
    """Projectile in flight"""
    x: float
    y: float
    vx: float
    vy: float
    profile: WeaponProfile
    owner: Side

    @property
    def radius(self) -> float:
        return self.profile.radius

    def advance(self):
        self.x += self.vx
        self.y += self.vy


@dataclass
class Particle:
    """Cosmetic explosion fragment"""
    x: float
    y: float
    vx: float
    vy: float
    life: float  # ticks left
    color: Tuple[int, int, int]
    size: float

    @property
    def alive(self) -> bool:
        return self.life > 0

    @property
    def life_fraction(self) -> float:
        return clamp(self.life / PARTICLE_CONFIG["max_life"], 0.0, 1.0)

    def advance(self):
        self.x += self.vx
        self.y += self.vy
        self.life -= 1


def spawn_explosion(x: float, y: float, color: Optional[Tuple[int, int, int]] = None) -> List[Particle]:
    """Burst of particles flying out from an impact point"""
    color = color or PARTICLE_CONFIG["default_color"]
    particles = []
    for _ in range(PARTICLE_CONFIG["count"]):
        angle = random.uniform(0.0, math.pi * 2)
        speed = random.uniform(*PARTICLE_CONFIG["speed_range"])
        particles.append(Particle(
            x=x,
            y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            life=random.uniform(*PARTICLE_CONFIG["life_range"]),
            color=color,
            size=random.uniform(*PARTICLE_CONFIG["size_range"]),
        ))
    return particles


@dataclass
class Tank:
    """Axis-aligned tank; (x, y) is the top-left corner of its box"""
    side: Side
    x: float
    y: float
    bounds: Tuple[float, float, float, float]  # x_lo, y_lo, x_hi, y_hi for the top-left corner
    width: float = 30.0
    height: float = 30.0
    max_health: float = 100.0
    health: float = 100.0
    speed: float = 3.0
    facing: Facing = Facing.RIGHT
    barrel_length: float = 25.0
    fire_cooldown: float = 1.5
    last_shot: float = -math.inf

    @classmethod
    def from_config(cls, side: Side, x: float, y: float, config: MatchConfig) -> "Tank":
        size = config.tank_size
        bounds = (
            config.margin,
            config.margin,
            config.width - size - config.margin,
            config.height - size - config.margin,
        )
        tank = cls(
            side=side,
            x=x,
            y=y,
            bounds=bounds,
            width=size,
            height=size,
            max_health=config.max_health,
            health=config.max_health,
            speed=config.tank_speed,
            barrel_length=config.barrel_length,
            fire_cooldown=config.fire_cooldown,
        )
        tank.place(x, y)
        return tank

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def alive(self) -> bool:
        return self.health > 0

    def place(self, x: float, y: float):
        x_lo, y_lo, x_hi, y_hi = self.bounds
        self.x = clamp(x, x_lo, x_hi)
        self.y = clamp(y, y_lo, y_hi)

    def move(self, dx: float, dy: float):
        self.place(self.x + dx, self.y + dy)

        # Facing follows the requested delta, horizontal first
        if dx > 0:
            self.facing = Facing.RIGHT
        elif dx < 0:
            self.facing = Facing.LEFT
        elif dy > 0:
            self.facing = Facing.DOWN
        elif dy < 0:
            self.facing = Facing.UP

    def can_shoot(self, now: float) -> bool:
        return now - self.last_shot >= self.fire_cooldown

    def shoot(self, now: float, profile: WeaponProfile) -> Optional[Projectile]:
        """Fire along the current facing; None while the cooldown runs"""
        if not self.can_shoot(now):
            return None
        self.last_shot = now

        fx, fy = self.facing.value
        cx, cy = self.center
        return Projectile(
            x=cx + fx * self.barrel_length,
            y=cy + fy * self.barrel_length,
            vx=fx * profile.speed,
            vy=fy * profile.speed,
            profile=profile,
            owner=self.side,
        )

    def take_damage(self, amount: float) -> float:
        """Returns the health actually removed"""
        before = self.health
        self.health = clamp(self.health - amount, 0.0, self.max_health)
        return before - self.health

    def respawn(self, x: float, y: float):
        self.place(x, y)
        self.health = self.max_health
