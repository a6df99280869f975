from __future__ import annotations

import logging
import random

from esper import World

from blast.components.game_state import GameMode, GameState
from blast.components.level_config import LevelConfig
from blast.constants import GAME_OVER_RESTART_DELAY, MIN_GROUP_SIZE
from blast.errors import TapOutcome
from blast.events.bus import (
    EVENT_BOARD_INITIALIZED,
    EVENT_CELL_SPAWNED,
    EVENT_GAME_STARTED,
    EVENT_INPUT_STATE_CHANGED,
    EVENT_PIPELINE_ABORTED,
    EVENT_PIPELINE_IDLE,
    EVENT_TAP,
    EVENT_TAP_DROPPED,
    EVENT_TICK,
    EventBus,
)
from blast.systems.blast_pipeline import BlastPipelineSystem
from blast.systems.board_ops import create_board, in_bounds, init_board
from blast.systems.group_finder import find_group
from blast.systems.score_system import ScoreSystem
from blast.utils.game_state import get_game_state, set_game_mode

logger = logging.getLogger(__name__)


class GameController:
    """Façade between the input layer and the core.

    Taps are dropped silently while input is locked (pipeline busy, game over
    or input disabled by the host), when they miss the board, hit a group
    smaller than two or when no moves remain. Accepted taps are charged a
    move and scored before the pipeline runs.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        score_system: ScoreSystem,
        pipeline: BlastPipelineSystem,
        *,
        config: LevelConfig,
        rng: random.Random | None = None,
        restart_delay: float | None = GAME_OVER_RESTART_DELAY,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.score_system = score_system
        self.pipeline = pipeline
        self.config = config
        candidate_rng = rng or getattr(world, "random", None)
        self.rng = candidate_rng if isinstance(candidate_rng, random.Random) else random.Random()
        self.restart_delay = restart_delay
        self.event_bus.subscribe(EVENT_TAP, self.on_tap)
        self.event_bus.subscribe(EVENT_PIPELINE_IDLE, self.on_pipeline_idle)
        self.event_bus.subscribe(EVENT_PIPELINE_ABORTED, self.on_pipeline_aborted)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def game_state(self) -> GameState:
        return get_game_state(self.world)

    @property
    def mode(self) -> GameMode:
        return self.game_state.mode

    @property
    def score(self) -> int:
        return self.score_system.score

    @property
    def moves_left(self) -> int:
        return self.score_system.moves_left

    @property
    def current_multiplier(self) -> float:
        return self.score_system.current_multiplier

    @property
    def is_game_over(self) -> bool:
        return self.score_system.is_game_over

    @property
    def input_locked(self) -> bool:
        state = self.game_state
        return state.mode != GameMode.PLAYING or not state.input_active or self.pipeline.busy

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start_game(self) -> None:
        """Generate a fresh board, reset counters and settle before opening input."""
        self.pipeline.cancel()
        state = self.game_state
        state.restart_timer = 0.0
        set_game_mode(self.world, self.event_bus, GameMode.SETUP)
        config = self.config
        create_board(self.world, config.cols, config.rows, config.palette_size)
        self.event_bus.emit(
            EVENT_BOARD_INITIALIZED,
            cols=config.cols,
            rows=config.rows,
            palette_size=config.palette_size,
        )
        for x, y, color_index in init_board(self.world, self.rng):
            self.event_bus.emit(EVENT_CELL_SPAWNED, x=x, y=y, color_index=color_index)
        self.score_system.start_game()
        self.event_bus.emit(EVENT_GAME_STARTED)
        set_game_mode(self.world, self.event_bus, GameMode.RESOLVING)
        self.pipeline.settle()

    def tap(self, x: int, y: int) -> TapOutcome:
        outcome = self._handle_tap(x, y)
        if outcome != TapOutcome.ACCEPTED:
            logger.debug("Tap at (%s, %s) dropped: %s", x, y, outcome.name)
            self.event_bus.emit(EVENT_TAP_DROPPED, x=x, y=y, outcome=outcome)
        return outcome

    def set_input_active(self, active: bool) -> None:
        state = self.game_state
        if state.input_active == active:
            return
        state.input_active = active
        self.event_bus.emit(EVENT_INPUT_STATE_CHANGED, active=active)

    def teardown(self) -> None:
        """Abandon the current game at a phase boundary; start_game() is needed afterwards."""
        self.pipeline.cancel()
        set_game_mode(self.world, self.event_bus, GameMode.SETUP)

    def _handle_tap(self, x: int, y: int) -> TapOutcome:
        if self.input_locked:
            return TapOutcome.INPUT_LOCKED
        if not in_bounds(self.world, x, y):
            return TapOutcome.OUT_OF_BOUNDS
        group = find_group(self.world, x, y)
        if len(group) < MIN_GROUP_SIZE:
            return TapOutcome.NOT_ENOUGH_MATCHES
        if not self.score_system.try_use_move():
            return TapOutcome.NO_MOVES_LEFT
        self.score_system.add_score(len(group))
        set_game_mode(self.world, self.event_bus, GameMode.RESOLVING)
        return self.pipeline.on_tap(x, y)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_tap(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        self.tap(int(x), int(y))

    def on_pipeline_idle(self, sender, **kwargs):
        if self.mode != GameMode.RESOLVING:
            return
        if self.score_system.moves_left <= 0:
            set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
            self.score_system.check_game_end()
            return
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)

    def on_pipeline_aborted(self, sender, **kwargs):
        reason = kwargs.get("reason", "unknown")
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        self.score_system.abort_game(reason)

    def on_tick(self, sender, **kwargs):
        if self.restart_delay is None or self.mode != GameMode.GAME_OVER:
            return
        state = self.game_state
        state.restart_timer += kwargs.get("dt", 1 / 60)
        if state.restart_timer >= self.restart_delay:
            logger.info("Restarting after game over")
            self.start_game()
