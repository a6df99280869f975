from __future__ import annotations

from collections import deque
from typing import Deque, List, Set

from esper import World

from blast.constants import MIN_GROUP_SIZE
from blast.systems.board_ops import Position, cell_at, get_board, neighbors4

Group = List[Position]


def find_group(world: World, x: int, y: int) -> Group:
    """Breadth-first flood fill of the same-color group containing (x, y).

    The seed comes first; neighbours are queued N, S, E, W. Empty or
    out-of-range seeds yield an empty list.
    """
    seed = cell_at(world, x, y)
    if seed is None or seed.empty:
        return []
    target = seed.color_index
    result: Group = []
    queue: Deque[Position] = deque([(x, y)])
    visited: Set[Position] = {(x, y)}
    while queue:
        current = queue.popleft()
        result.append(current)
        for neighbor in neighbors4(world, *current):
            if neighbor in visited:
                continue
            cell = cell_at(world, *neighbor)
            if cell is None or cell.empty or cell.color_index != target:
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return result


def find_all_groups(world: World) -> List[Group]:
    """Partition the non-empty cells into groups, scanning column-major."""
    board = get_board(world)
    visited: Set[Position] = set()
    groups: List[Group] = []
    for x in range(board.cols):
        for y in range(board.rows):
            if (x, y) in visited:
                continue
            group = find_group(world, x, y)
            if not group:
                continue
            visited.update(group)
            groups.append(group)
    return groups


def legal_groups(world: World) -> List[Group]:
    return [group for group in find_all_groups(world) if len(group) >= MIN_GROUP_SIZE]


def has_legal_move(world: World) -> bool:
    board = get_board(world)
    for x in range(board.cols):
        for y in range(board.rows):
            cell = cell_at(world, x, y)
            if cell is None or cell.empty:
                continue
            for nx, ny in neighbors4(world, x, y):
                other = cell_at(world, nx, ny)
                if other is not None and not other.empty and other.color_index == cell.color_index:
                    return True
    return False
