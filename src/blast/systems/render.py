from __future__ import annotations

import itertools
from typing import Dict, Tuple

import arcade
from esper import World

from blast.components.animation_fade import FadeAnimation
from blast.components.animation_refill import RefillAnimation
from blast.components.cell import Cell
from blast.components.game_state import GameMode
from blast.constants import LOW_MOVES_WARNING
from blast.events.bus import (
    EVENT_BOARD_INITIALIZED,
    EVENT_CELL_CLEARED,
    EVENT_CELL_SPAWNED,
    EVENT_GAME_OVER,
    EVENT_GROUP_CLASSIFIED,
    EVENT_MOVES_CHANGED,
    EVENT_MULTIPLIER_CHANGED,
    EVENT_SCORE_CHANGED,
    EventBus,
)
from blast.systems.animation import AnimationSystem
from blast.systems.board_ops import attach_view_handle, get_board
from blast.systems.group_classifier import GroupTier
from blast.ui.layout import compute_board_geometry
from blast.ui.palette import color_for_index
from blast.utils.game_state import get_game_state

PADDING = 4
# Inner marker scale per tier; larger groups get a bigger badge.
TIER_MARKER_SCALE = {
    GroupTier.DEFAULT: 0.0,
    GroupTier.A: 0.25,
    GroupTier.B: 0.4,
    GroupTier.C: 0.55,
}


def ease_in_out(p: float) -> float:
    if p < 0.5:
        return 2 * p * p
    return -2 * p * p + 4 * p - 1


class RenderSystem:
    """Arcade view collaborator: draws the board and HUD from core events."""

    def __init__(self, world: World, event_bus: EventBus, window, animation_system: AnimationSystem):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.animation_system = animation_system
        self._handles = itertools.count(1)
        self._live_handles: set[int] = set()
        self._tiers: Dict[Tuple[int, int], GroupTier] = {}
        self._hud = {"score": 0, "moves": 0, "multiplier": 1.0}
        self._game_over_text: str | None = None
        self.event_bus.subscribe(EVENT_BOARD_INITIALIZED, self.on_board_initialized)
        self.event_bus.subscribe(EVENT_CELL_SPAWNED, self.on_cell_spawned)
        self.event_bus.subscribe(EVENT_CELL_CLEARED, self.on_cell_cleared)
        self.event_bus.subscribe(EVENT_GROUP_CLASSIFIED, self.on_group_classified)
        self.event_bus.subscribe(EVENT_SCORE_CHANGED, self.on_score_changed)
        self.event_bus.subscribe(EVENT_MOVES_CHANGED, self.on_moves_changed)
        self.event_bus.subscribe(EVENT_MULTIPLIER_CHANGED, self.on_multiplier_changed)
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)

    def on_board_initialized(self, sender, **kwargs):
        self._live_handles.clear()
        self._tiers.clear()
        self._game_over_text = None

    def on_cell_spawned(self, sender, **kwargs):
        handle = next(self._handles)
        if attach_view_handle(self.world, kwargs['x'], kwargs['y'], handle):
            self._live_handles.add(handle)

    def on_cell_cleared(self, sender, **kwargs):
        handle = kwargs.get('view_handle')
        if handle is not None:
            self._live_handles.discard(handle)

    def on_group_classified(self, sender, **kwargs):
        tier = kwargs.get('tier', GroupTier.DEFAULT)
        for pos in kwargs.get('cells', []):
            self._tiers[tuple(pos)] = tier

    def on_score_changed(self, sender, **kwargs):
        self._hud["score"] = kwargs.get('score', 0)

    def on_moves_changed(self, sender, **kwargs):
        self._hud["moves"] = kwargs.get('moves_left', 0)

    def on_multiplier_changed(self, sender, **kwargs):
        self._hud["multiplier"] = kwargs.get('multiplier', 1.0)

    def on_game_over(self, sender, **kwargs):
        if kwargs.get('new_record'):
            self._game_over_text = f"NEW RECORD {kwargs.get('score', 0)}!"
        else:
            self._game_over_text = f"GAME OVER - best {kwargs.get('high_score', 0)}"

    def process(self):
        try:
            board = get_board(self.world)
        except RuntimeError:
            return
        tile_size, start_x, start_y = compute_board_geometry(
            self.window.width, self.window.height, board.cols, board.rows
        )
        fades = {fade.pos: fade.alpha for _, fade in self.world.get_component(FadeAnimation)}
        refills = {refill.pos: refill.progress for _, refill in self.world.get_component(RefillAnimation)}
        draw_size = max(tile_size - PADDING, 4)
        for x in range(board.cols):
            for y in range(board.rows):
                cell: Cell = self.world.component_for_entity(board.grid[x][y], Cell)
                base_x = start_x + x * tile_size + PADDING / 2
                base_y = start_y + y * tile_size + PADDING / 2
                if cell.empty:
                    alpha = fades.get((x, y))
                    if alpha is not None:
                        self._draw_tile(base_x, base_y, draw_size, (230, 230, 230, int(255 * alpha)))
                    continue
                draw_y = base_y + self.animation_system.fall_offset(x, y) * tile_size
                spawn = refills.get((x, y))
                if spawn is not None:
                    lift = tile_size * 1.2 * (1.0 - ease_in_out(spawn))
                    draw_y = base_y + lift
                self._draw_tile(base_x, draw_y, draw_size, color_for_index(cell.color_index))
                scale = TIER_MARKER_SCALE.get(self._tiers.get((x, y), GroupTier.DEFAULT), 0.0)
                if scale > 0.0:
                    inset = draw_size * (1.0 - scale) / 2
                    self._draw_tile(base_x + inset, draw_y + inset, draw_size * scale, (250, 250, 250, 200))
        self._draw_hud()

    def _draw_tile(self, left: float, bottom: float, size: float, color) -> None:
        arcade.draw_lrbt_rectangle_filled(left, left + size, bottom, bottom + size, color)

    def _draw_hud(self) -> None:
        top = self.window.height - 30
        moves = self._hud["moves"]
        moves_color = arcade.color.RED if moves <= LOW_MOVES_WARNING else arcade.color.WHITE
        multiplier = self._hud["multiplier"]
        multiplier_color = (255, 255, 255, 128) if multiplier <= 1.0 else arcade.color.GOLD
        arcade.draw_text(f"Score {self._hud['score']}", 20, top, arcade.color.WHITE, 18)
        arcade.draw_text(f"Moves {moves}", self.window.width / 2 - 50, top, moves_color, 18)
        arcade.draw_text(f"x{multiplier:.1f}", self.window.width - 100, top, multiplier_color, 18)
        state = get_game_state(self.world)
        if state.mode == GameMode.GAME_OVER and self._game_over_text:
            arcade.draw_text(
                self._game_over_text,
                self.window.width / 2,
                self.window.height / 2,
                arcade.color.WHITE,
                28,
                anchor_x="center",
            )
