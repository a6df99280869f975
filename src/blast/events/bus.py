from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def has_subscribers(self, name: str) -> bool:
        sig = self._signals.get(name)
        return bool(sig and sig.receivers)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TAP = "tap"                                  # payload: x=int, y=int
EVENT_TAP_DROPPED = "tap_dropped"                  # payload: x=int, y=int, outcome=TapOutcome
EVENT_INPUT_STATE_CHANGED = "input_state_changed"  # payload: active=bool


# ============================================================================
# BOARD (view sink)
# ============================================================================
EVENT_BOARD_INITIALIZED = "board_initialized"      # payload: cols=int, rows=int, palette_size=int
EVENT_CELL_SPAWNED = "cell_spawned"                # payload: x, y, color_index
EVENT_CELL_CLEARED = "cell_cleared"                # payload: x, y, color_index, size, view_handle
EVENT_CELL_MOVED = "cell_moved"                    # payload: x, from_y, to_y, color_index
EVENT_CELLS_RESHUFFLED = "cells_reshuffled"        # payload: cells=list[(x, y, color_index)], attempt=int, forced=bool
EVENT_GROUP_CLASSIFIED = "group_classified"        # payload: cells=list[(x, y)], tier=GroupTier, color_index


# ============================================================================
# PIPELINE
# ============================================================================
EVENT_BLAST_STARTED = "blast_started"              # payload: group_size=int, color_index=int
EVENT_PIPELINE_PHASE = "pipeline_phase"            # payload: phase=PipelinePhase
EVENT_PIPELINE_IDLE = "pipeline_idle"              # payload: legal_groups=int
EVENT_PIPELINE_ABORTED = "pipeline_aborted"        # payload: reason=str
EVENT_PIPELINE_CANCELLED = "pipeline_cancelled"    # payload: None
EVENT_DEADLOCK_DETECTED = "deadlock_detected"      # payload: None


# ============================================================================
# ANIMATION (phase acks)
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list


# ============================================================================
# AUDIO (fire and forget)
# ============================================================================
EVENT_BLAST_OCCURRED = "blast_occurred"            # payload: count=int
EVENT_DROP_OCCURRED = "drop_occurred"              # payload: count=int


# ============================================================================
# SCORE & GAME FLOW (ui sink)
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_MOVES_CHANGED = "moves_changed"              # payload: moves_left=int
EVENT_MULTIPLIER_CHANGED = "multiplier_changed"    # payload: multiplier=float, index=int
EVENT_GAME_STARTED = "game_started"                # payload: None
EVENT_GAME_OVER = "game_over"                      # payload: new_record=bool, score=int, high_score=int
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
