"""
Per-frame simulation of the tank duel.

``tick`` composes the whole frame over an explicit ``SimulationState``:

  1. the player tank moves/fires from the held-key ``InputState``;
  2. the bot asks its ``BotController`` for a move and fire decision;
  3. projectiles fly, leave the arena or hit the opposing tank
     (damage, explosion, death policy);
  4. particles decay;
  5. the round clock is checked, advancing the round or ending the match.

It returns a read-only ``Snapshot`` for the presentation layer and never
schedules itself; the host decides how often to call it.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .ai import BotController
from .config import ENDLESS_ROUNDS, DeathPolicy, MatchConfig
from .entities import Facing, Particle, Projectile, Side, Tank, spawn_explosion
from .utils import aabb_overlap, out_of_bounds

logger = logging.getLogger(__name__)

_KEY_BINDINGS = {
    "left": ("left", "arrowleft", "a"),
    "right": ("right", "arrowright", "d"),
    "up": ("up", "arrowup", "w"),
    "down": ("down", "arrowdown", "s"),
    "fire": ("space", " "),
}


class Phase(Enum):
    MENU = "menu"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class InputState:
    """Keys held at the start of a tick"""
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    fire: bool = False

    @classmethod
    def from_keys(cls, held: Iterable[str]) -> "InputState":
        names = {key.lower() for key in held}
        return cls(**{
            action: any(key in names for key in keys)
            for action, keys in _KEY_BINDINGS.items()
        })


@dataclass(frozen=True)
class MatchResult:
    winner: Side
    score: int
    round: int
    player_health: float
    bot_health: float


# ----------------------------
# Snapshot views
# ----------------------------

@dataclass(frozen=True)
class TankView:
    side: Side
    x: float
    y: float
    width: float
    height: float
    facing: Facing
    health: float
    max_health: float


@dataclass(frozen=True)
class ProjectileView:
    x: float
    y: float
    radius: float
    color: Tuple[int, int, int]
    special: bool


@dataclass(frozen=True)
class ParticleView:
    x: float
    y: float
    size: float
    color: Tuple[int, int, int]
    life_fraction: float


@dataclass(frozen=True)
class Snapshot:
    phase: Phase
    player: Optional[TankView]
    bot: Optional[TankView]
    weapon_name: str
    projectiles: Tuple[ProjectileView, ...]
    particles: Tuple[ParticleView, ...]
    round: int
    max_rounds: int
    running: bool
    game_over: bool
    result: Optional[MatchResult]

    @property
    def endless(self) -> bool:
        return self.max_rounds == ENDLESS_ROUNDS


# ----------------------------
# State
# ----------------------------

@dataclass
class SimulationState:
    """Everything the tick reads and writes"""
    config: MatchConfig = field(default_factory=MatchConfig)
    player: Optional[Tank] = None
    bot: Optional[Tank] = None
    projectiles: List[Projectile] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    round: int = 1
    max_rounds: int = 5
    difficulty: int = 1
    running: bool = False
    game_over: bool = False
    round_started: float = 0.0
    result: Optional[MatchResult] = None
    bot_ai: BotController = field(default_factory=BotController)
    # Health removed from each side since the match started
    damage_taken: Dict[Side, float] = field(default_factory=lambda: {Side.PLAYER: 0.0, Side.BOT: 0.0})

    @property
    def phase(self) -> Phase:
        if self.running:
            return Phase.RUNNING
        if self.game_over:
            return Phase.GAME_OVER
        return Phase.MENU

    @property
    def weapon(self):
        return self.config.weapon_for_round(self.round)

    def tank(self, side: Side) -> Tank:
        return self.player if side is Side.PLAYER else self.bot


def begin_match(state: SimulationState, difficulty: int, max_rounds: int, now: float):
    config = state.config
    state.difficulty = difficulty
    state.max_rounds = max_rounds
    state.round = 1
    state.player = Tank.from_config(Side.PLAYER, *config.player_spawn, config)
    state.bot = Tank.from_config(Side.BOT, *config.bot_spawn, config)
    state.projectiles = []
    state.particles = []
    state.result = None
    state.damage_taken = {Side.PLAYER: 0.0, Side.BOT: 0.0}
    state.game_over = False
    state.running = True
    state.round_started = now


def staging_point(state: SimulationState, side: Side) -> Tuple[float, float]:
    """Random point inside a side's staging area"""
    config = state.config
    x0, y0, w, h = config.player_staging if side is Side.PLAYER else config.bot_staging
    return x0 + random.random() * w, y0 + random.random() * h


def respawn(state: SimulationState, side: Side):
    state.tank(side).respawn(*staging_point(state, side))


def end_match(state: SimulationState, winner: Side) -> MatchResult:
    winner_tank = state.tank(winner)
    result = MatchResult(
        winner=winner,
        score=state.round * 50 + math.floor(winner_tank.health),
        round=state.round,
        player_health=state.player.health,
        bot_health=state.bot.health,
    )
    state.result = result
    state.projectiles = []
    state.particles = []
    state.running = False
    state.game_over = True
    logger.info(
        "Match over in round %d: %s wins with score %d",
        result.round, winner.value, result.score,
    )
    return result


def end_match_on_health(state: SimulationState) -> MatchResult:
    """Ties go to the player"""
    winner = Side.PLAYER if state.player.health >= state.bot.health else Side.BOT
    return end_match(state, winner)


def advance_round(state: SimulationState):
    state.round += 1
    respawn(state, Side.PLAYER)
    respawn(state, Side.BOT)
    state.projectiles = []
    logger.info("Round %d begins with %s", state.round, state.weapon.name)


def fire(state: SimulationState, tank: Tank, now: float) -> bool:
    projectile = tank.shoot(now, state.weapon)
    if projectile is None:
        return False
    state.projectiles.append(projectile)
    return True


# ----------------------------
# Tick phases
# ----------------------------

def _update_player(state: SimulationState, inputs: InputState, now: float):
    player = state.player
    dx, dy = 0.0, 0.0
    if inputs.left:
        dx -= player.speed
    if inputs.right:
        dx += player.speed
    if inputs.up:
        dy -= player.speed
    if inputs.down:
        dy += player.speed

    if dx != 0 or dy != 0:
        player.move(dx, dy)

    if inputs.fire:
        fire(state, player, now)


def _update_bot(state: SimulationState, now: float):
    decision = state.bot_ai.decide(state.bot, state.player, state.difficulty, now)
    state.bot.move(decision.dx, decision.dy)
    if decision.fire:
        fire(state, state.bot, now)


def _update_projectiles(state: SimulationState) -> bool:
    """Fly and resolve projectiles; returns False once the match has ended"""
    config = state.config
    remaining = []
    for p in state.projectiles:
        p.advance()

        if out_of_bounds(p.x, p.y, config.width, config.height):
            continue

        target = state.tank(p.owner.opponent)
        r = p.radius
        if not aabb_overlap(target.x, target.y, target.width, target.height,
                            p.x - r, p.y - r, r * 2, r * 2):
            remaining.append(p)
            continue

        state.damage_taken[target.side] += target.take_damage(p.profile.damage)
        state.particles.extend(spawn_explosion(p.x, p.y, p.profile.color))

        if not target.alive:
            if config.death_policy is DeathPolicy.END_MATCH:
                end_match(state, p.owner)
                return False
            respawn(state, target.side)
            logger.info("%s tank destroyed, respawning", target.side.value)

    state.projectiles = remaining
    return True


def _update_particles(state: SimulationState):
    for particle in state.particles:
        particle.advance()
    state.particles = [p for p in state.particles if p.alive]


def _check_round(state: SimulationState, now: float):
    if now - state.round_started <= state.config.round_duration:
        return
    state.round_started = now

    if state.round >= state.max_rounds and state.max_rounds != ENDLESS_ROUNDS:
        end_match_on_health(state)
        return
    advance_round(state)


def tick(state: SimulationState, inputs: InputState, now: float) -> Snapshot:
    """Advance the simulation by one frame"""
    if not state.running or state.game_over or state.player is None or state.bot is None:
        return take_snapshot(state)

    _update_player(state, inputs, now)
    _update_bot(state, now)

    if not _update_projectiles(state):
        return take_snapshot(state)

    _update_particles(state)
    _check_round(state, now)
    return take_snapshot(state)


# ----------------------------
# Snapshot
# ----------------------------

def _tank_view(tank: Optional[Tank]) -> Optional[TankView]:
    if tank is None:
        return None
    return TankView(
        side=tank.side,
        x=tank.x,
        y=tank.y,
        width=tank.width,
        height=tank.height,
        facing=tank.facing,
        health=tank.health,
        max_health=tank.max_health,
    )


def take_snapshot(state: SimulationState) -> Snapshot:
    default_weapon = state.config.weapons[0]
    return Snapshot(
        phase=state.phase,
        player=_tank_view(state.player),
        bot=_tank_view(state.bot),
        weapon_name=state.weapon.name,
        projectiles=tuple(
            ProjectileView(p.x, p.y, p.radius, p.profile.color, p.profile != default_weapon)
            for p in state.projectiles
        ),
        particles=tuple(
            ParticleView(p.x, p.y, p.size, p.color, p.life_fraction)
            for p in state.particles
        ),
        round=state.round,
        max_rounds=state.max_rounds,
        running=state.running,
        game_over=state.game_over,
        result=state.result,
    )
