"""
Match controller: owns the simulation state and the menu/running/game-over flow
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Optional, Union

from .config import DEFAULT_PRESET, ENDLESS_ROUNDS, MatchConfig, parse_difficulty, parse_max_rounds
from .entities import Side
from .simulation import (
    InputState,
    Phase,
    SimulationState,
    Snapshot,
    begin_match,
    fire,
    take_snapshot,
    tick,
)

logger = logging.getLogger(__name__)


class MatchController:
    """Front door for a host: start, tick, restart.

    Every method takes an optional ``now`` timestamp in seconds; when it
    is omitted the controller's clock (``time.monotonic`` by default) is
    read instead, so tests and the Gymnasium env can drive time directly.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        preset: str = DEFAULT_PRESET,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or MatchConfig.from_preset(preset)
        self.clock = clock
        self.state = SimulationState(config=self.config)

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def start(self, difficulty=1, max_rounds=5, now: Optional[float] = None) -> bool:
        """Menu -> Running. Ignored in any other phase."""
        if self.phase is not Phase.MENU:
            logger.debug("Ignoring start while %s", self.phase.value)
            return False

        difficulty = parse_difficulty(difficulty)
        max_rounds = parse_max_rounds(max_rounds)
        begin_match(self.state, difficulty, max_rounds, self._now(now))
        logger.info(
            "Match started: difficulty %d, %s rounds, %s rules",
            difficulty,
            "endless" if max_rounds == ENDLESS_ROUNDS else max_rounds,
            self.config.death_policy.value,
        )
        return True

    def restart(self) -> bool:
        """GameOver -> Menu. Tanks and the last result stay for display."""
        if self.phase is not Phase.GAME_OVER:
            logger.debug("Ignoring restart while %s", self.phase.value)
            return False
        self.state.game_over = False
        return True

    def press_fire(self, now: Optional[float] = None) -> bool:
        """Edge-triggered player fire, e.g. from a key-down event"""
        if self.phase is not Phase.RUNNING:
            return False
        return fire(self.state, self.state.player, self._now(now))

    def tick(
        self,
        inputs: Union[InputState, Iterable[str], None] = None,
        now: Optional[float] = None,
    ) -> Snapshot:
        if inputs is None:
            inputs = InputState()
        elif not isinstance(inputs, InputState):
            inputs = InputState.from_keys(inputs)
        return tick(self.state, inputs, self._now(now))

    def snapshot(self) -> Snapshot:
        return take_snapshot(self.state)

    @property
    def winner(self) -> Optional[Side]:
        result = self.state.result
        return result.winner if result else None
