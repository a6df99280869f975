from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from esper import World

from blast.components.level_config import LevelConfig
from blast.constants import DEFAULT_SEED
from blast.events.bus import EVENT_ANIMATION_COMPLETE, EVENT_ANIMATION_START, EventBus
from blast.systems.board_ops import cell_at, create_board, get_board, paint_cell
from blast.utils.kv_store import MemoryKeyValueStore
from blast.world import create_game


class ManualClock:
    """Clock callable whose time only moves when a test says so."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class ImmediateAckSink:
    """View stand-in that acknowledges every phase synchronously."""

    def __init__(self, bus: EventBus):
        self.bus = bus
        self.kinds: List[str] = []
        bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind')
        self.kinds.append(kind)
        self.bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=kwargs.get('items', []))


class SilentSink:
    """View stand-in that never acknowledges, so every phase waits for the timeout."""

    def __init__(self, bus: EventBus):
        self.kinds: List[str] = []
        bus.subscribe(EVENT_ANIMATION_START, lambda sender, **k: self.kinds.append(k.get('kind')))


class EventRecorder:
    """Records (name, payload) for the given event names in arrival order."""

    def __init__(self, bus: EventBus, *names: str):
        self.events: List[Tuple[str, Dict]] = []
        for name in names:
            bus.subscribe(name, self._make_handler(name))

    def _make_handler(self, name: str):
        def handler(sender, **payload):
            self.events.append((name, payload))
        return handler

    def of(self, name: str) -> List[Dict]:
        return [payload for event, payload in self.events if event == name]

    def names(self) -> List[str]:
        return [event for event, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


def make_board(world: World, columns: Sequence[Sequence[int]], palette_size: int = 2) -> None:
    """Create a board from bottom-to-top column lists, ``columns[x][y]``."""
    rows = len(columns[0])
    create_board(world, len(columns), rows, palette_size)
    paint_board(world, columns)


def paint_board(world: World, columns: Sequence[Sequence[int]]) -> None:
    board = get_board(world)
    assert len(columns) == board.cols
    for x, column in enumerate(columns):
        assert len(column) == board.rows
        for y, color_index in enumerate(column):
            paint_cell(world, x, y, color_index)


def checkerboard(cols: int, rows: int) -> List[List[int]]:
    return [[(x + y) % 2 for y in range(rows)] for x in range(cols)]


def build_game(
    rows: int = 4,
    cols: int = 4,
    palette_size: int = 3,
    max_moves: int = 10,
    *,
    seed: int = DEFAULT_SEED,
    clock: ManualClock | None = None,
    store: MemoryKeyValueStore | None = None,
    ack: bool = True,
    restart_delay: float | None = None,
    **kwargs,
):
    """Controller wired with a manual clock, memory store and (optionally) an immediate-ack view."""
    config = LevelConfig(rows=rows, cols=cols, palette_size=palette_size, max_moves=max_moves)
    clock = clock or ManualClock()
    store = store if store is not None else MemoryKeyValueStore()
    bus = EventBus()
    sink = ImmediateAckSink(bus) if ack else None
    controller = create_game(
        config,
        event_bus=bus,
        seed=seed,
        clock=clock,
        store=store,
        restart_delay=restart_delay,
        **kwargs,
    )
    return controller, clock, store, sink


def colors(world: World) -> List[List[int]]:
    board = get_board(world)
    return [[cell_at(world, x, y).color_index for y in range(board.rows)] for x in range(board.cols)]
