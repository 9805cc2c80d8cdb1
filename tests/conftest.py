"""Shared fixtures for tank duel tests."""

from __future__ import annotations

import pytest

from tankduel.config import MatchConfig
from tankduel.entities import Projectile, Side
from tankduel.match import MatchController


def started(preset: str, difficulty: int = 3, max_rounds=5) -> MatchController:
    # Difficulty 3 has no movement jitter, so the bot's path is deterministic
    controller = MatchController(MatchConfig.from_preset(preset), clock=lambda: 0.0)
    controller.start(difficulty, max_rounds, now=0.0)
    return controller


@pytest.fixture
def controller() -> MatchController:
    """Running match under the respawn rules."""
    return started("respawn")


@pytest.fixture
def sudden_death() -> MatchController:
    """Running match under the sudden-death rules."""
    return started("sudden_death")


@pytest.fixture
def make_projectile():
    """Factory for a stationary projectile of the current round's weapon."""

    def _make(controller: MatchController, x: float, y: float, owner: Side,
              vx: float = 0.0, vy: float = 0.0) -> Projectile:
        return Projectile(x=x, y=y, vx=vx, vy=vy,
                          profile=controller.state.weapon, owner=owner)

    return _make


@pytest.fixture
def start_match():
    """Factory for a running match with a given preset, difficulty and round count."""
    return started
