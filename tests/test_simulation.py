"""Unit tests for the per-frame tick: movement, projectiles, death policies, rounds."""

from __future__ import annotations

import logging

import pytest

from tankduel.config import ENDLESS_ROUNDS
from tankduel.entities import Side, spawn_explosion
from tankduel.simulation import InputState, Phase, SimulationState, begin_match, tick
from tankduel.utils import seed_everything

pytestmark = pytest.mark.unit


# --------------------------------------------------------------------------
# Input
# --------------------------------------------------------------------------

class TestInputState:
    def test_arrow_keys_and_space(self):
        inputs = InputState.from_keys({"ArrowLeft", " "})
        assert inputs == InputState(left=True, fire=True)

    def test_wasd_any_case(self):
        assert InputState.from_keys({"W", "d"}) == InputState(up=True, right=True)

    def test_unknown_keys_ignored(self):
        assert InputState.from_keys({"q", "Enter"}) == InputState()


# --------------------------------------------------------------------------
# Movement
# --------------------------------------------------------------------------

class TestMovement:
    def test_pure_tick_without_controller(self):
        state = SimulationState()
        begin_match(state, difficulty=3, max_rounds=5, now=0.0)
        for i in range(10):
            tick(state, InputState(right=True), now=i / 60)
        assert state.player.x == pytest.approx(180.0)

    def test_opposite_keys_cancel(self, controller):
        player = controller.state.player
        player.move(0, -3)
        controller.tick(InputState(left=True, right=True), now=0.1)
        assert player.x == 150.0
        assert player.facing.name == "UP"

    def test_bot_closes_in(self, controller):
        controller.tick(now=0.1)
        assert controller.state.bot.x == pytest.approx(600 - 3.3)

    def test_tanks_stay_in_bounds(self, start_match):
        seed_everything(7)
        controller = start_match("respawn", difficulty=1)
        combos = [{"ArrowLeft", "ArrowUp"}, {"ArrowRight", " "}, {"ArrowDown"}, {"a", "s", " "}]
        for i in range(600):
            snap = controller.tick(combos[(i // 40) % len(combos)], now=i / 60)
            for tank in (snap.player, snap.bot):
                assert 50 <= tank.x <= 800 - 30 - 50
                assert 50 <= tank.y <= 600 - 30 - 50
                assert 0 <= tank.health <= tank.max_health


# --------------------------------------------------------------------------
# Firing
# --------------------------------------------------------------------------

class TestFiring:
    def test_fire_key_spawns_player_projectile(self, controller):
        snap = controller.tick({"space"}, now=0.1)
        assert len(snap.projectiles) == 1
        assert controller.state.projectiles[0].owner is Side.PLAYER

    def test_held_fire_respects_cooldown(self, controller):
        controller.tick({"space"}, now=0.1)
        controller.tick({"space"}, now=0.2)
        assert len(controller.state.projectiles) == 1
        controller.tick({"space"}, now=1.6)
        assert len(controller.state.projectiles) == 2

    def test_press_fire(self, controller):
        assert controller.press_fire(now=0.1)
        assert not controller.press_fire(now=0.5)
        assert len(controller.state.projectiles) == 1

    def test_projectile_flies(self, controller):
        controller.tick({"space"}, now=0.1)
        controller.tick(now=0.2)
        p = controller.state.projectiles[0]
        assert (p.x, p.y) == (190.0 + 16.0, 315.0)


# --------------------------------------------------------------------------
# Projectile resolution
# --------------------------------------------------------------------------

class TestProjectiles:
    def test_leaving_arena_removes_without_damage(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [
            make_projectile(controller, 798.0, 10.0, Side.PLAYER, vx=8.0),
            make_projectile(controller, 5.0, 590.0, Side.BOT, vy=15.0),
        ]
        controller.tick(now=0.1)
        assert state.projectiles == []
        assert state.player.health == 100.0
        assert state.bot.health == 100.0
        assert state.particles == []

    def test_hit_on_opponent(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [make_projectile(controller, 610.0, 315.0, Side.PLAYER)]
        snap = controller.tick(now=0.1)
        assert snap.bot.health == 92.0
        assert snap.projectiles == ()
        assert len(snap.particles) == 15
        assert all(p.color == (255, 255, 0) for p in snap.particles)

    def test_bot_projectile_hits_player(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [make_projectile(controller, 165.0, 315.0, Side.BOT)]
        controller.tick(now=0.1)
        assert state.player.health == 92.0
        assert state.projectiles == []

    def test_no_self_damage(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [make_projectile(controller, 165.0, 315.0, Side.PLAYER)]
        controller.tick(now=0.1)
        assert state.player.health == 100.0
        assert len(state.projectiles) == 1
        assert state.particles == []

    def test_one_hit_per_projectile(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [
            make_projectile(controller, 610.0, 315.0, Side.PLAYER),
            make_projectile(controller, 612.0, 318.0, Side.PLAYER),
        ]
        controller.tick(now=0.1)
        assert state.bot.health == 84.0
        assert state.projectiles == []

    def test_special_flag_for_non_default_weapon(self, controller, make_projectile):
        state = controller.state
        state.projectiles = [make_projectile(controller, 400.0, 100.0, Side.PLAYER)]
        state.round = 2
        state.projectiles.append(make_projectile(controller, 400.0, 150.0, Side.PLAYER))
        snap = controller.snapshot()
        assert [p.special for p in snap.projectiles] == [False, True]
        assert snap.weapon_name == "Fireball"


# --------------------------------------------------------------------------
# Death policies
# --------------------------------------------------------------------------

class TestDeathPolicy:
    def test_sudden_death_bot_destroyed(self, sudden_death, make_projectile):
        state = sudden_death.state
        state.bot.health = 5.0
        state.particles = spawn_explosion(300.0, 300.0)
        state.projectiles = [
            make_projectile(sudden_death, 610.0, 315.0, Side.PLAYER),
            make_projectile(sudden_death, 400.0, 100.0, Side.BOT),
        ]
        snap = sudden_death.tick(now=0.1)
        assert snap.phase is Phase.GAME_OVER
        assert snap.game_over and not snap.running
        assert snap.result.winner is Side.PLAYER
        assert snap.result.score == 1 * 50 + 200
        assert snap.bot.health == 0
        assert snap.projectiles == ()
        assert snap.particles == ()

    def test_sudden_death_player_destroyed(self, sudden_death, make_projectile):
        state = sudden_death.state
        state.player.health = 3.0
        state.projectiles = [make_projectile(sudden_death, 165.0, 315.0, Side.BOT)]
        snap = sudden_death.tick(now=0.1)
        assert snap.result.winner is Side.BOT
        assert snap.result.score == 50 + 200

    def test_respawn_keeps_match_running(self, controller, make_projectile):
        state = controller.state
        state.bot.health = 5.0
        state.projectiles = [make_projectile(controller, 610.0, 315.0, Side.PLAYER)]
        snap = controller.tick(now=0.1)
        assert snap.running
        assert snap.bot.health == 100.0
        assert 550.0 <= snap.bot.x <= 600.0
        assert 200.0 <= snap.bot.y <= 400.0
        assert state.damage_taken[Side.BOT] == 5.0
        assert len(snap.particles) == 15


# --------------------------------------------------------------------------
# Rounds
# --------------------------------------------------------------------------

class TestRounds:
    def test_no_advance_at_exact_duration(self, controller):
        snap = controller.tick(now=30.0)
        assert snap.round == 1

    def test_round_advance(self, controller, make_projectile):
        state = controller.state
        state.round = 2
        state.player.health = 40.0
        state.bot.health = 70.0
        state.particles = spawn_explosion(400.0, 100.0)
        state.projectiles = [make_projectile(controller, 400.0, 100.0, Side.PLAYER)]

        snap = controller.tick(now=30.5)

        assert snap.round == 3
        assert snap.running
        assert snap.player.health == snap.bot.health == 100.0
        assert snap.projectiles == ()
        assert len(snap.particles) == 15
        assert snap.weapon_name == "Snowball"
        assert 150.0 <= snap.player.x <= 200.0
        assert 550.0 <= snap.bot.x <= 600.0
        assert state.round_started == 30.5

    def test_round_clock_restarts(self, controller):
        controller.tick(now=30.5)
        assert controller.tick(now=60.0).round == 2
        assert controller.tick(now=61.0).round == 3

    def test_last_round_ends_on_health(self, controller):
        state = controller.state
        state.round = 5
        state.player.health = 40.0
        state.bot.health = 55.0
        snap = controller.tick(now=31.0)
        assert snap.game_over
        assert snap.round == 5
        assert snap.result.winner is Side.BOT
        assert snap.result.score == 5 * 50 + 55

    def test_tie_goes_to_player(self, controller):
        state = controller.state
        state.round = 5
        state.player.health = 70.5
        state.bot.health = 70.5
        snap = controller.tick(now=31.0)
        assert snap.result.winner is Side.PLAYER
        assert snap.result.score == 5 * 50 + 70

    def test_endless_never_ends(self, start_match):
        controller = start_match("respawn", max_rounds="endless")
        controller.state.round = 12
        snap = controller.tick(now=31.0)
        assert snap.max_rounds == ENDLESS_ROUNDS
        assert snap.endless
        assert snap.round == 13
        assert snap.running

    def test_round_advance_logged(self, controller, caplog):
        caplog.set_level(logging.INFO, logger="tankduel.simulation")
        controller.tick(now=31.0)
        assert "Round 2 begins with Fireball" in caplog.text


# --------------------------------------------------------------------------
# Particles
# --------------------------------------------------------------------------

class TestParticleStore:
    def test_expired_particles_pruned(self, controller):
        state = controller.state
        state.particles = spawn_explosion(400.0, 100.0)
        for p in state.particles[:5]:
            p.life = 1
        controller.tick(now=0.1)
        assert len(state.particles) == 10

    def test_particle_view_alpha(self, controller):
        state = controller.state
        state.particles = spawn_explosion(400.0, 100.0)
        state.particles[0].life = 40
        snap = controller.snapshot()
        assert snap.particles[0].life_fraction == 1.0
