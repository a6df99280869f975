from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from esper import World

from blast.components.pipeline_state import PipelinePhase, PipelineState
from blast.constants import ACK_TIMEOUT, MAX_SHUFFLE_ATTEMPTS, MIN_GROUP_SIZE
from blast.errors import InvariantViolation, TapOutcome
from blast.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BLAST_OCCURRED,
    EVENT_BLAST_STARTED,
    EVENT_CELL_CLEARED,
    EVENT_CELL_MOVED,
    EVENT_CELL_SPAWNED,
    EVENT_DEADLOCK_DETECTED,
    EVENT_DROP_OCCURRED,
    EVENT_GROUP_CLASSIFIED,
    EVENT_PIPELINE_ABORTED,
    EVENT_PIPELINE_CANCELLED,
    EVENT_PIPELINE_IDLE,
    EVENT_PIPELINE_PHASE,
    EVENT_TICK,
    EventBus,
)
from blast.systems.board_ops import (
    cell_at,
    clear_cell,
    collapse_columns,
    in_bounds,
    refill_empty_cells,
    validate_settled,
)
from blast.systems.deadlock import is_deadlocked, resolve_deadlock
from blast.systems.group_classifier import classify_group_size
from blast.systems.group_finder import find_all_groups, find_group
from blast.utils.pipeline_state import get_or_create_pipeline_state

logger = logging.getLogger(__name__)

# Ack kinds requested from the view collaborator, one per phase.
ACK_BLAST = "blast"
ACK_COLLAPSE = "collapse"
ACK_REFILL = "refill"
ACK_CLASSIFY = "classify"
ACK_SHUFFLE = "shuffle"


class BlastPipelineSystem:
    """Runs the reaction to a legal tap as an explicit phase state machine.

    P0 legality, P1 blast, P2 collapse, P3 refill, P4 reclassify and P5
    deadlock recovery. Board mutations inside a phase happen without
    interruption; between phases the system asks the view for an ack with
    EVENT_ANIMATION_START and resumes on the matching EVENT_ANIMATION_COMPLETE.
    Acks that never arrive time out on EVENT_TICK. With no view subscribed the
    phases run back to back.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
        ack_timeout: float = ACK_TIMEOUT,
        max_shuffle_attempts: int = MAX_SHUFFLE_ATTEMPTS,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        candidate_rng = rng or getattr(world, "random", None)
        self.rng = candidate_rng if isinstance(candidate_rng, random.Random) else random.Random()
        self.ack_timeout = ack_timeout
        self.max_shuffle_attempts = max_shuffle_attempts
        self._continuation: Optional[Callable[[], None]] = None
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def state(self) -> PipelineState:
        return get_or_create_pipeline_state(self.world)

    @property
    def busy(self) -> bool:
        return self.state.busy

    @property
    def phase(self) -> PipelinePhase:
        return self.state.phase

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def on_tap(self, x: int, y: int) -> TapOutcome:
        """Start a run for the group at (x, y); move accounting is the caller's job."""
        if self.busy:
            return TapOutcome.INPUT_LOCKED
        if not in_bounds(self.world, x, y):
            return TapOutcome.OUT_OF_BOUNDS
        state = self.state
        self._enter(PipelinePhase.LEGALITY)
        group = find_group(self.world, x, y)
        if len(group) < MIN_GROUP_SIZE:
            self._enter(PipelinePhase.IDLE)
            return TapOutcome.NOT_ENOUGH_MATCHES
        state.group = group
        state.color_index = cell_at(self.world, x, y).color_index
        state.runs += 1
        self._run(self._blast)
        return TapOutcome.ACCEPTED

    def settle(self) -> bool:
        """Classify and deadlock-check a freshly generated board (P4/P5 only)."""
        if self.busy:
            return False
        self._run(self._classify)
        return True

    def cancel(self) -> bool:
        """Stop at the current phase boundary and drop any outstanding ack."""
        state = self.state
        if not state.busy:
            return False
        logger.debug("Pipeline cancelled during %s", state.phase.value)
        self._continuation = None
        state.awaiting_ack = None
        state.ack_elapsed = 0.0
        state.group = []
        state.color_index = -1
        self._enter(PipelinePhase.IDLE)
        self.event_bus.emit(EVENT_PIPELINE_CANCELLED)
        return True

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def _blast(self) -> None:
        self._enter(PipelinePhase.BLAST)
        state = self.state
        group = list(state.group)
        size = len(group)
        color_index = state.color_index
        self.event_bus.emit(EVENT_BLAST_STARTED, group_size=size, color_index=color_index)
        for x, y in group:
            handle = clear_cell(self.world, x, y)
            self.event_bus.emit(
                EVENT_CELL_CLEARED,
                x=x,
                y=y,
                color_index=color_index,
                size=size,
                view_handle=handle,
            )
        self.event_bus.emit(EVENT_BLAST_OCCURRED, count=size)
        self._await_ack(ACK_BLAST, group, self._collapse)

    def _collapse(self) -> None:
        self._enter(PipelinePhase.COLLAPSE)
        moves = collapse_columns(self.world)
        for move in moves:
            self.event_bus.emit(
                EVENT_CELL_MOVED,
                x=move.x,
                from_y=move.from_y,
                to_y=move.to_y,
                color_index=move.color_index,
            )
        validate_settled(self.world, require_full=False)
        if moves:
            self.event_bus.emit(EVENT_DROP_OCCURRED, count=len(moves))
        items = [{"x": m.x, "from": m.from_y, "to": m.to_y} for m in moves]
        self._await_ack(ACK_COLLAPSE, items, self._refill)

    def _refill(self) -> None:
        self._enter(PipelinePhase.REFILL)
        spawned = refill_empty_cells(self.world, self.rng)
        for x, y, color_index in spawned:
            self.event_bus.emit(EVENT_CELL_SPAWNED, x=x, y=y, color_index=color_index)
        validate_settled(self.world)
        self._await_ack(ACK_REFILL, [(x, y) for x, y, _ in spawned], self._classify)

    def _classify(self) -> None:
        self._enter(PipelinePhase.CLASSIFY)
        legal = 0
        groups = find_all_groups(self.world)
        for group in groups:
            color_index = cell_at(self.world, *group[0]).color_index
            self.event_bus.emit(
                EVENT_GROUP_CLASSIFIED,
                cells=list(group),
                tier=classify_group_size(len(group)),
                color_index=color_index,
            )
            if len(group) >= MIN_GROUP_SIZE:
                legal += 1
        self.state.legal_groups = legal
        follow_up = self._finish if legal else self._recover_deadlock
        self._await_ack(ACK_CLASSIFY, [len(group) for group in groups], follow_up)

    def _recover_deadlock(self) -> None:
        self._enter(PipelinePhase.DEADLOCK)
        self.event_bus.emit(EVENT_DEADLOCK_DETECTED)
        report = resolve_deadlock(
            self.world,
            self.event_bus,
            self.rng,
            max_attempts=self.max_shuffle_attempts,
        )
        self.state.shuffles += report.attempts
        validate_settled(self.world)
        if is_deadlocked(self.world):
            raise InvariantViolation("deadlock persists after shuffling")
        logger.info("Deadlock recovered after %d shuffle(s)%s", report.attempts, " (forced)" if report.forced else "")
        self._await_ack(ACK_SHUFFLE, [], self._classify)

    def _finish(self) -> None:
        state = self.state
        state.group = []
        state.color_index = -1
        self._enter(PipelinePhase.IDLE)
        self.event_bus.emit(EVENT_PIPELINE_IDLE, legal_groups=state.legal_groups)

    # ------------------------------------------------------------------
    # Ack handling
    # ------------------------------------------------------------------
    def _await_ack(self, kind: str, items: List, continuation: Callable[[], None]) -> None:
        state = self.state
        state.awaiting_ack = kind
        state.ack_elapsed = 0.0
        self._continuation = continuation
        if not self.event_bus.has_subscribers(EVENT_ANIMATION_START):
            self._resolve_ack()
            return
        # A synchronous view may ack inside this call; nothing may follow it.
        self.event_bus.emit(EVENT_ANIMATION_START, kind=kind, items=items)

    def on_animation_complete(self, sender, **kwargs):
        kind = kwargs.get("kind")
        awaiting = self.state.awaiting_ack
        if awaiting is None or kind != awaiting:
            return
        self._resolve_ack()

    def on_tick(self, sender, **kwargs):
        state = self.state
        if state.awaiting_ack is None:
            return
        dt = kwargs.get("dt", 1 / 60)
        state.ack_elapsed += dt
        if state.ack_elapsed >= self.ack_timeout:
            logger.warning(
                "No ack for '%s' within %.2fs; continuing pipeline",
                state.awaiting_ack,
                self.ack_timeout,
            )
            self._resolve_ack()

    def _resolve_ack(self) -> None:
        state = self.state
        continuation = self._continuation
        self._continuation = None
        state.awaiting_ack = None
        state.ack_elapsed = 0.0
        if continuation is not None:
            self._run(continuation)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _enter(self, phase: PipelinePhase) -> None:
        self.state.phase = phase
        self.event_bus.emit(EVENT_PIPELINE_PHASE, phase=phase)

    def _run(self, step: Callable[[], None]) -> None:
        try:
            step()
        except InvariantViolation as exc:
            self._abort(str(exc))

    def _abort(self, reason: str) -> None:
        logger.error("Pipeline aborted: %s", reason)
        self.cancel()
        self.event_bus.emit(EVENT_PIPELINE_ABORTED, reason=reason)
