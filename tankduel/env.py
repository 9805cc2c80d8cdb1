"""
TankDuelEnv - the tank duel as a Gymnasium environment
------------------------------------------------------
- Gymnasium API over the same MatchController the Arcade host uses
- 1 RL agent drives the player tank against the scripted bot
- Simulated clock: every step advances time by dt, so cooldowns and
  round timers are step-driven
- Vector observation: both tanks + fire readiness + round progress +
  K nearest bot projectiles
- MultiDiscrete action space: [move(5), fire(2)]

Quick test:
    python -m tankduel.env
"""

from __future__ import annotations

from typing import Optional, Dict, Any

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import ENV_CONFIG, REWARD_CONFIG, MatchConfig
from .entities import Facing, Side
from .match import MatchController
from .simulation import InputState
from .utils import clamp, seed_everything

# move: 0 stay, 1 up, 2 down, 3 left, 4 right
_MOVES = (
    InputState(),
    InputState(up=True),
    InputState(down=True),
    InputState(left=True),
    InputState(right=True),
)

_FACINGS = (Facing.UP, Facing.DOWN, Facing.LEFT, Facing.RIGHT)


class TankDuelEnv(gym.Env):
    """Player-tank control against the scripted bot"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        preset: str = ENV_CONFIG["preset"],
        difficulty: int = ENV_CONFIG["difficulty"],
        max_rounds: int = ENV_CONFIG["max_rounds"],
        dt: float = ENV_CONFIG["dt"],
        max_steps: int = ENV_CONFIG["max_steps"],
        k_projectiles: int = ENV_CONFIG["k_projectiles"],
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode

        self.difficulty = difficulty
        self.max_rounds = max_rounds
        self.dt = dt
        self.max_steps = max_steps
        self.k_projectiles = k_projectiles
        self.reward_config = dict(REWARD_CONFIG, **(reward_config or {}))

        self.config = MatchConfig.from_preset(preset)
        self._time = 0.0
        self.controller = MatchController(self.config, clock=lambda: self._time)

        self.action_space = spaces.MultiDiscrete([5, 2])

        # Player: pos(2) health(1) facing(4) fire-ready(1)
        # Bot: rel pos(2) health(1)
        # Round: progress(1) weapon index(1)
        # Each projectile: rel pos(2) vel(2)
        obs_dim = 2 + 1 + 4 + 1 + 2 + 1 + 1 + 1 + (self.k_projectiles * 4)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self._step_count = 0
        self._events: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self._time = 0.0
        self._step_count = 0
        self.controller = MatchController(self.config, clock=lambda: self._time)
        self.controller.start(self.difficulty, self.max_rounds)

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, shoot = int(action[0]), int(action[1])
        assert 0 <= move < len(_MOVES), f"Invalid move: {move}"

        state = self.controller.state
        dealt_before = state.damage_taken[Side.BOT]
        taken_before = state.damage_taken[Side.PLAYER]
        shots_before = state.player.last_shot

        self._time += self.dt
        inputs = _MOVES[move]
        if shoot:
            inputs = InputState(inputs.left, inputs.right, inputs.up, inputs.down, True)
        snapshot = self.controller.tick(inputs)

        self._events = {
            "shot": float(state.player.last_shot != shots_before),
            "dealt": state.damage_taken[Side.BOT] - dealt_before,
            "taken": state.damage_taken[Side.PLAYER] - taken_before,
        }

        reward = self._compute_reward(snapshot)

        terminated = snapshot.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        state = self.controller.state
        config = self.config
        player, bot = state.player, state.bot
        w, h = config.width, config.height

        obs_parts = [
            player.x / w * 2 - 1,
            player.y / h * 2 - 1,
            player.health / player.max_health * 2 - 1,
        ]
        obs_parts += [1.0 if player.facing is f else 0.0 for f in _FACINGS]
        obs_parts.append(1.0 if player.can_shoot(self._time) else -1.0)

        obs_parts += [
            clamp((bot.x - player.x) / w, -1, 1),
            clamp((bot.y - player.y) / h, -1, 1),
            bot.health / bot.max_health * 2 - 1,
        ]

        elapsed = self._time - state.round_started
        progress = clamp(elapsed / config.round_duration, 0.0, 1.0)
        weapon_index = config.weapons.index(state.weapon)
        obs_parts += [
            progress * 2 - 1,
            weapon_index / max(1, len(config.weapons) - 1) * 2 - 1,
        ]

        # Incoming projectiles: top-K nearest
        cx, cy = player.center
        incoming = sorted(
            (p for p in state.projectiles if p.owner is Side.BOT),
            key=lambda p: (p.x - cx) ** 2 + (p.y - cy) ** 2
        )
        max_speed = max(p.speed for p in config.weapons)
        for i in range(self.k_projectiles):
            if i < len(incoming):
                p = incoming[i]
                obs_parts += [
                    clamp((p.x - cx) / w, -1, 1),
                    clamp((p.y - cy) / h, -1, 1),
                    clamp(p.vx / max_speed, -1, 1),
                    clamp(p.vy / max_speed, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, snapshot) -> float:
        rc = self.reward_config

        reward = 0.0
        reward += rc["R_DAMAGE_DEALT"] * self._events.get("dealt", 0.0)
        reward -= rc["R_DAMAGE_TAKEN"] * self._events.get("taken", 0.0)
        reward -= rc["R_SHOT"] * self._events.get("shot", 0.0)

        if snapshot.game_over and snapshot.result is not None:
            if snapshot.result.winner is Side.PLAYER:
                reward += rc["R_WIN"]
            else:
                reward -= rc["R_LOSS"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        state = self.controller.state
        result = state.result
        return {
            "player_health": state.player.health,
            "bot_health": state.bot.health,
            "round": state.round,
            "weapon": state.weapon.name,
            "num_projectiles": len(state.projectiles),
            "num_particles": len(state.particles),
            "step": self._step_count,
            "winner": result.winner.value if result else None,
            "score": result.score if result else None,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import DuelWindow
            self._window = DuelWindow(self.controller, interactive=False)

        self._window.controller = self.controller
        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, max_steps: Optional[int] = None, seed: Optional[int] = 42):
    """Run a random episode for testing"""
    kwargs = {"render_mode": "human" if render else None}
    if max_steps is not None:
        kwargs["max_steps"] = max_steps
    env = TankDuelEnv(**kwargs)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"Random episode return: {total:.3f} (round {info['round']}, winner {info['winner']})")
    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
