"""
Configuration for the tank duel
Arena geometry, weapon profiles and the two match presets
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Tuple


# Arena / tank parameters (units are pixels per tick, times are seconds)
ARENA_CONFIG = {
    "width": 800,
    "height": 600,
    "margin": 50,            # inset of the tank bounds rectangle on every side
    "tank_size": 30,
    "tank_speed": 3.0,
    "barrel_length": 25.0,
    "fire_cooldown": 1.5,
    # Start-of-match spawn points (top-left of the tank box)
    "player_spawn": (150.0, 300.0),
    "bot_spawn": (600.0, 300.0),
    # Staging areas used for respawns: (x_min, y_min, x_span, y_span)
    "player_staging": (150.0, 200.0, 50.0, 200.0),
    "bot_staging": (550.0, 200.0, 50.0, 200.0),
}

# AI tuning
AI_CONFIG = {
    "pursuit_threshold": 100.0,
    "base_fire_cooldown": 1.5,
    "cooldown_step": 0.1,     # seconds shaved off per difficulty tier
    "base_range": 250.0,
    "range_step": 30.0,       # extra engagement range per difficulty tier
    "jitter_tiers": 3,        # tiers below this get random jitter
}

# Explosion particles
PARTICLE_CONFIG = {
    "count": 15,
    "speed_range": (1.0, 5.0),
    "life_range": (20.0, 40.0),
    "size_range": (2.0, 6.0),
    "max_life": 40.0,
    "default_color": (255, 136, 0),
}

ENDLESS_ROUNDS = 999
DEFAULT_MAX_ROUNDS = 5
ROUND_CHOICES = (3, 5, 10, ENDLESS_ROUNDS)


class WeaponProfile(NamedTuple):
    """Damage/visual profile of a projectile"""
    name: str
    color: Tuple[int, int, int]
    speed: float
    damage: float
    radius: float


# Rounds cycle through these in order
WEAPON_PROFILES: Tuple[WeaponProfile, ...] = (
    WeaponProfile("Bullet", (255, 255, 0), 8.0, 8.0, 3.0),
    WeaponProfile("Fireball", (255, 136, 0), 5.0, 6.0, 4.0),
    WeaponProfile("Snowball", (136, 255, 255), 6.0, 5.0, 3.5),
)


class DeathPolicy(Enum):
    """What happens when a tank's health reaches zero"""
    END_MATCH = "end_match"
    RESPAWN = "respawn"


# ==============================================================================
# MATCH PRESETS
# The two observed rule sets of the game
# ==============================================================================

MATCH_PRESET_SUDDEN_DEATH = {
    "name": "sudden_death",
    "description": "200 HP tanks, 40s rounds, a destroyed tank loses the match",
    "max_health": 200.0,
    "round_duration": 40.0,
    "death_policy": DeathPolicy.END_MATCH,
}

MATCH_PRESET_RESPAWN = {
    "name": "respawn",
    "description": "100 HP tanks, 30s rounds, destroyed tanks respawn; only the last round ends the match",
    "max_health": 100.0,
    "round_duration": 30.0,
    "death_policy": DeathPolicy.RESPAWN,
}

MATCH_PRESETS = {
    "sudden_death": MATCH_PRESET_SUDDEN_DEATH,
    "respawn": MATCH_PRESET_RESPAWN,
}

DEFAULT_PRESET = "respawn"


@dataclass(frozen=True)
class MatchConfig:
    """Rule knobs captured when a match starts"""
    max_health: float = 100.0
    round_duration: float = 30.0
    death_policy: DeathPolicy = DeathPolicy.RESPAWN
    width: float = ARENA_CONFIG["width"]
    height: float = ARENA_CONFIG["height"]
    margin: float = ARENA_CONFIG["margin"]
    tank_size: float = ARENA_CONFIG["tank_size"]
    tank_speed: float = ARENA_CONFIG["tank_speed"]
    barrel_length: float = ARENA_CONFIG["barrel_length"]
    fire_cooldown: float = ARENA_CONFIG["fire_cooldown"]
    player_spawn: Tuple[float, float] = ARENA_CONFIG["player_spawn"]
    bot_spawn: Tuple[float, float] = ARENA_CONFIG["bot_spawn"]
    player_staging: Tuple[float, float, float, float] = ARENA_CONFIG["player_staging"]
    bot_staging: Tuple[float, float, float, float] = ARENA_CONFIG["bot_staging"]
    weapons: Tuple[WeaponProfile, ...] = WEAPON_PROFILES

    @classmethod
    def from_preset(cls, name: str = DEFAULT_PRESET, **overrides) -> "MatchConfig":
        if name not in MATCH_PRESETS:
            raise ValueError(f"Unknown preset: {name}")
        preset = MATCH_PRESETS[name]
        config = cls(
            max_health=preset["max_health"],
            round_duration=preset["round_duration"],
            death_policy=preset["death_policy"],
        )
        return replace(config, **overrides)

    def weapon_for_round(self, round_number: int) -> WeaponProfile:
        return self.weapons[(round_number - 1) % len(self.weapons)]


def parse_max_rounds(value) -> int:
    """Parse a max-round setting; malformed values fall back to the default.

    Accepts ints, numeric strings and "endless".
    """
    if isinstance(value, str) and value.strip().lower() == "endless":
        return ENDLESS_ROUNDS
    try:
        rounds = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_ROUNDS
    if rounds < 1:
        return DEFAULT_MAX_ROUNDS
    return rounds


def next_round_choice(current: int) -> int:
    """Next entry of ROUND_CHOICES after current, wrapping to the first.

    A value outside the choices (e.g. 7 from the command line) moves to the
    next larger choice.
    """
    for choice in ROUND_CHOICES:
        if choice > current:
            return choice
    return ROUND_CHOICES[0]


def parse_difficulty(value) -> int:
    """Parse a difficulty tier (integer >= 1); malformed values become 1"""
    try:
        difficulty = int(value)
    except (TypeError, ValueError):
        return 1
    return max(1, difficulty)


# ==============================================================================
# GYMNASIUM ENVIRONMENT
# ==============================================================================

ENV_CONFIG = {
    "preset": "respawn",
    "difficulty": 1,
    "max_rounds": 3,
    "dt": 1 / 60,
    "max_steps": 3600 * 3,   # three 30s rounds at 60 FPS
    "k_projectiles": 4,
}

REWARD_CONFIG = {
    "R_DAMAGE_DEALT": 0.05,   # per health point removed from the bot
    "R_DAMAGE_TAKEN": 0.05,   # per health point lost
    "R_SHOT": 0.01,           # penalty per projectile fired
    "R_WIN": 5.0,
    "R_LOSS": 5.0,
}
