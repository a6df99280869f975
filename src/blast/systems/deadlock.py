from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import List, MutableSequence

from esper import World

from blast.constants import MAX_SHUFFLE_ATTEMPTS
from blast.events.bus import EVENT_CELLS_RESHUFFLED, EventBus
from blast.systems.board_ops import ColorEntry, Position, cell_at, color_map, get_board, neighbors4
from blast.systems.group_finder import has_legal_move

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ShuffleReport:
    attempts: int = 0
    forced: bool = False


def is_deadlocked(world: World) -> bool:
    """A board is deadlocked when no two adjacent non-empty cells share a color."""
    return not has_legal_move(world)


def fisher_yates(values: MutableSequence[int], rng: random.Random) -> None:
    for i in range(len(values) - 1, 0, -1):
        j = rng.randrange(i + 1)
        values[i], values[j] = values[j], values[i]


def shuffle_colors(world: World, rng: random.Random) -> List[ColorEntry]:
    """Permute the colors of all non-empty cells in place; the color multiset is kept."""
    board = get_board(world)
    positions: List[Position] = []
    colors: List[int] = []
    for x in range(board.cols):
        for y in range(board.rows):
            cell = cell_at(world, x, y)
            if cell is None or cell.empty:
                continue
            positions.append((x, y))
            colors.append(cell.color_index)
    fisher_yates(colors, rng)
    reassigned: List[ColorEntry] = []
    for (x, y), color in zip(positions, colors):
        cell = cell_at(world, x, y)
        cell.color_index = color
        reassigned.append((x, y, color))
    return reassigned


def force_adjacent_pair(world: World) -> List[ColorEntry]:
    """Make two neighbouring cells share a color by direct assignment.

    When some color occurs at least twice the second occurrence is swapped
    next to the first, so the color multiset survives; otherwise a neighbour
    is simply repainted.
    """
    mapping = color_map(world)
    if len(mapping) < 2:
        return []
    counts = Counter(mapping.values())
    repeated = [color for color, count in counts.items() if count >= 2]
    for anchor, color in mapping.items():
        if repeated and color != repeated[0]:
            continue
        partners = [pos for pos in neighbors4(world, *anchor) if pos in mapping]
        if not partners:
            continue
        partner = partners[0]
        if repeated:
            donor = next(pos for pos, c in mapping.items() if c == color and pos != anchor)
            partner_color = mapping[partner]
            cell_at(world, *donor).color_index = partner_color
            cell_at(world, *partner).color_index = color
            return [(donor[0], donor[1], partner_color), (partner[0], partner[1], color)]
        cell_at(world, *partner).color_index = color
        return [(partner[0], partner[1], color)]
    return []


def resolve_deadlock(
    world: World,
    event_bus: EventBus,
    rng: random.Random,
    *,
    max_attempts: int = MAX_SHUFFLE_ATTEMPTS,
) -> ShuffleReport:
    """Shuffle until at least one legal move exists.

    Emits EVENT_CELLS_RESHUFFLED once per shuffle. After ``max_attempts``
    failed shuffles an adjacent pair is forced.
    """
    report = ShuffleReport()
    while is_deadlocked(world):
        if report.attempts >= max_attempts:
            cells = force_adjacent_pair(world)
            report.forced = True
            if not cells:
                logger.error("Deadlock could not be broken: fewer than two cells on the board")
                return report
            logger.warning("Shuffle cap of %d reached; forcing an adjacent pair", max_attempts)
            event_bus.emit(EVENT_CELLS_RESHUFFLED, cells=cells, attempt=report.attempts, forced=True)
            return report
        report.attempts += 1
        cells = shuffle_colors(world, rng)
        event_bus.emit(EVENT_CELLS_RESHUFFLED, cells=cells, attempt=report.attempts, forced=False)
    if report.attempts:
        logger.debug("Deadlock resolved after %d shuffle(s)", report.attempts)
    return report
