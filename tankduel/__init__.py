"""Tank duel - human tank vs scripted bot across timed rounds"""

from .config import DeathPolicy, MatchConfig, WeaponProfile, ENDLESS_ROUNDS
from .entities import Facing, Side, Tank, Projectile, Particle
from .match import MatchController
from .simulation import InputState, Phase, Snapshot, SimulationState, MatchResult, tick

__all__ = [
    'DeathPolicy', 'MatchConfig', 'WeaponProfile', 'ENDLESS_ROUNDS',
    'Facing', 'Side', 'Tank', 'Projectile', 'Particle',
    'MatchController',
    'InputState', 'Phase', 'Snapshot', 'SimulationState', 'MatchResult', 'tick',
]
