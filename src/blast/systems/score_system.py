from __future__ import annotations

import logging
import math
from time import monotonic
from typing import Callable

from esper import World

from blast.components.score_state import ScoreState
from blast.constants import (
    BASE_SIZE_BONUS,
    HIGH_SCORE_KEY,
    MULTIPLIER_LEVELS,
    POINTS_PER_BLOCK,
    SIZE_BONUS_BREAKPOINTS,
)
from blast.events.bus import (
    EVENT_GAME_OVER,
    EVENT_MOVES_CHANGED,
    EVENT_MULTIPLIER_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EventBus,
)
from blast.utils.kv_store import KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)


def size_bonus(block_count: int) -> float:
    for min_count, bonus in SIZE_BONUS_BREAKPOINTS:
        if block_count >= min_count:
            return bonus
    return BASE_SIZE_BONUS


def score_delta(block_count: int, multiplier: float) -> int:
    """Points for blasting ``block_count`` cells at the given multiplier."""
    base = block_count * POINTS_PER_BLOCK
    # Rounding first keeps products like 70 * 1.1 from flooring one point low.
    return math.floor(round(base * size_bonus(block_count) * multiplier, 6))


class ScoreSystem:
    """Owns score, move budget and the combo multiplier.

    Counters live in a ScoreState component and are only mutated through this
    system. Changes are announced on the bus for the UI collaborator.
    Multiplier decay runs on EVENT_TICK using the injected clock.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        max_moves: int,
        store: KeyValueStore | None = None,
        clock: Callable[[], float] | None = None,
        combo_timeout: float | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.store: KeyValueStore = store if store is not None else MemoryKeyValueStore()
        self.clock = clock or monotonic
        self.state_entity = self._ensure_state(max_moves)
        if combo_timeout is not None:
            self.state.combo_timeout = float(combo_timeout)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def _ensure_state(self, max_moves: int) -> int:
        existing = list(self.world.get_component(ScoreState))
        if existing:
            entity, state = existing[0]
            state.max_moves = max_moves
            return entity
        return self.world.create_entity(ScoreState(max_moves=max_moves, moves_left=max_moves))

    @property
    def state(self) -> ScoreState:
        return self.world.component_for_entity(self.state_entity, ScoreState)

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def moves_left(self) -> int:
        return self.state.moves_left

    @property
    def current_multiplier(self) -> float:
        return self.state.multiplier

    @property
    def is_game_over(self) -> bool:
        return self.state.game_over

    @property
    def high_score(self) -> int:
        return self.store.get_int(HIGH_SCORE_KEY, 0)

    def start_game(self, now: float | None = None) -> None:
        state = self.state
        state.score = 0
        state.moves_left = state.max_moves
        state.multiplier_index = 0
        state.last_move_time = self.clock() if now is None else now
        state.game_over = False
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=0)
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_left=state.moves_left)
        self._emit_multiplier()

    def try_use_move(self, now: float | None = None) -> bool:
        state = self.state
        if state.moves_left <= 0:
            return False
        now = self.clock() if now is None else now
        state.moves_left -= 1
        self.event_bus.emit(EVENT_MOVES_CHANGED, moves_left=state.moves_left)
        if now - state.last_move_time <= state.combo_timeout:
            state.multiplier_index = min(state.multiplier_index + 1, len(MULTIPLIER_LEVELS) - 1)
        else:
            state.multiplier_index = 0
        state.last_move_time = now
        self._emit_multiplier()
        return True

    def tick_decay(self, now: float | None = None) -> bool:
        """Drop the multiplier one tier once the combo timeout has elapsed."""
        state = self.state
        if state.multiplier_index <= 0:
            return False
        now = self.clock() if now is None else now
        if now - state.last_move_time <= state.combo_timeout:
            return False
        state.multiplier_index -= 1
        state.last_move_time = now
        self._emit_multiplier()
        return True

    def add_score(self, block_count: int) -> int:
        if block_count <= 0:
            return 0
        state = self.state
        delta = score_delta(block_count, state.multiplier)
        state.score += delta
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=state.score, delta=delta)
        return delta

    def check_game_end(self) -> bool:
        state = self.state
        if state.moves_left > 0:
            return False
        if state.game_over:
            return True
        state.game_over = True
        high_score = self.high_score
        new_record = state.score > high_score
        if new_record:
            high_score = state.score
            self.store.set_int(HIGH_SCORE_KEY, high_score)
            self.store.save()
        logger.info("Game over: score=%d high_score=%d new_record=%s", state.score, high_score, new_record)
        self.event_bus.emit(EVENT_GAME_OVER, new_record=new_record, score=state.score, high_score=high_score)
        return True

    def abort_game(self, reason: str) -> None:
        """End the game without touching the high score."""
        state = self.state
        if state.game_over:
            return
        state.game_over = True
        logger.error("Game aborted: %s", reason)
        self.event_bus.emit(EVENT_GAME_OVER, new_record=False, score=state.score, high_score=self.high_score)

    def on_tick(self, sender, **kwargs):
        if self.state.game_over:
            return
        self.tick_decay()

    def _emit_multiplier(self) -> None:
        state = self.state
        self.event_bus.emit(EVENT_MULTIPLIER_CHANGED, multiplier=state.multiplier, index=state.multiplier_index)
