from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from esper import World

from blast.components.board import Board
from blast.components.board_position import BoardPosition
from blast.components.cell import Cell
from blast.errors import InvariantViolation

Position = Tuple[int, int]
ColorEntry = Tuple[int, int, int]

# N, S, E, W with y=0 at the bottom of the board.
NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))


@dataclass(slots=True)
class CellMove:
    x: int
    from_y: int
    to_y: int
    color_index: int


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    """Return (cols, rows) of the board, or None before one exists."""
    for _, board in world.get_component(Board):
        return board.cols, board.rows
    return None


def create_board(world: World, cols: int, rows: int, palette_size: int) -> int:
    """Create the board entity and one cell entity per grid slot (all empty)."""
    for entity, _ in list(world.get_component(Board)):
        destroy_board(world, entity)
    board = Board(rows=rows, cols=cols, palette_size=palette_size)
    for x in range(cols):
        column: List[int] = []
        for y in range(rows):
            column.append(world.create_entity(BoardPosition(x=x, y=y), Cell()))
        board.grid.append(column)
    return world.create_entity(board)


def destroy_board(world: World, board_entity: int) -> None:
    board: Board = world.component_for_entity(board_entity, Board)
    for column in board.grid:
        for entity in column:
            world.delete_entity(entity, immediate=True)
    world.delete_entity(board_entity, immediate=True)


def init_board(world: World, rng: random.Random) -> List[ColorEntry]:
    """Fill every cell with a uniformly random color, column-major."""
    board = get_board(world)
    spawned: List[ColorEntry] = []
    for x in range(board.cols):
        for y in range(board.rows):
            cell = world.component_for_entity(board.grid[x][y], Cell)
            cell.view_handle = None
            cell.fill(rng.randrange(board.palette_size))
            spawned.append((x, y, cell.color_index))
    return spawned


def in_bounds(world: World, x: int, y: int) -> bool:
    dims = board_dimensions(world)
    if not dims:
        return False
    cols, rows = dims
    return 0 <= x < cols and 0 <= y < rows


def entity_at(world: World, x: int, y: int) -> int | None:
    if not in_bounds(world, x, y):
        return None
    return get_board(world).grid[x][y]


def cell_at(world: World, x: int, y: int) -> Cell | None:
    entity = entity_at(world, x, y)
    if entity is None:
        return None
    return world.component_for_entity(entity, Cell)


def set_cell(world: World, x: int, y: int, cell: Cell) -> bool:
    """Replace the cell record at (x, y); False when out of range."""
    entity = entity_at(world, x, y)
    if entity is None:
        return False
    world.add_component(entity, cell)
    return True


def paint_cell(world: World, x: int, y: int, color_index: int) -> bool:
    cell = cell_at(world, x, y)
    if cell is None:
        return False
    cell.fill(color_index)
    return True


def clear_cell(world: World, x: int, y: int) -> Optional[Any]:
    """Mark the cell empty and hand its view handle back to the caller."""
    cell = cell_at(world, x, y)
    if cell is None:
        return None
    return cell.clear()


def attach_view_handle(world: World, x: int, y: int, handle: Any) -> bool:
    cell = cell_at(world, x, y)
    if cell is None or cell.empty:
        return False
    cell.view_handle = handle
    return True


def neighbors4(world: World, x: int, y: int) -> List[Position]:
    """In-bounds 4-connected neighbours in N, S, E, W order."""
    result: List[Position] = []
    for dx, dy in NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if in_bounds(world, nx, ny):
            result.append((nx, ny))
    return result


def color_map(world: World) -> Dict[Position, int]:
    """Return mapping of non-empty cell positions to their color index."""
    board = get_board(world)
    mapping: Dict[Position, int] = {}
    for x in range(board.cols):
        for y in range(board.rows):
            cell: Cell = world.component_for_entity(board.grid[x][y], Cell)
            if not cell.empty:
                mapping[(x, y)] = cell.color_index
    return mapping


def color_counts(world: World) -> Counter:
    return Counter(color_map(world).values())


def empty_positions(world: World) -> List[Position]:
    board = get_board(world)
    return [
        (x, y)
        for x in range(board.cols)
        for y in range(board.rows)
        if world.component_for_entity(board.grid[x][y], Cell).empty
    ]


def collapse_columns(world: World) -> List[CellMove]:
    """Bottom-pack every column, keeping relative order; return the moves made.

    Cell entities travel with their content, so a view handle follows the cell
    it belongs to. Columns are handled in order 0..C-1.
    """
    board = get_board(world)
    moves: List[CellMove] = []
    for x in range(board.cols):
        column = board.grid[x]
        living: List[int] = []
        vacant: List[int] = []
        for entity in column:
            cell: Cell = world.component_for_entity(entity, Cell)
            (vacant if cell.empty else living).append(entity)
        if len(living) > board.rows:
            raise InvariantViolation(
                f"column {x} holds {len(living)} living cells for {board.rows} rows"
            )
        packed = living + vacant
        for target_y, entity in enumerate(packed):
            position: BoardPosition = world.component_for_entity(entity, BoardPosition)
            if position.y != target_y:
                cell = world.component_for_entity(entity, Cell)
                if not cell.empty:
                    moves.append(CellMove(x=x, from_y=position.y, to_y=target_y, color_index=cell.color_index))
                position.y = target_y
        board.grid[x] = packed
    return moves


def refill_empty_cells(world: World, rng: random.Random) -> List[ColorEntry]:
    """Give every empty cell a uniformly random color, column-major."""
    board = get_board(world)
    spawned: List[ColorEntry] = []
    for x in range(board.cols):
        for y in range(board.rows):
            cell: Cell = world.component_for_entity(board.grid[x][y], Cell)
            if not cell.empty:
                continue
            cell.fill(rng.randrange(board.palette_size))
            spawned.append((x, y, cell.color_index))
    return spawned


def column_is_packed(world: World, x: int) -> bool:
    board = get_board(world)
    seen_empty = False
    for y in range(board.rows):
        cell: Cell = world.component_for_entity(board.grid[x][y], Cell)
        if cell.empty:
            seen_empty = True
        elif seen_empty:
            return False
    return True


def validate_settled(world: World, *, require_full: bool = True) -> None:
    """Raise InvariantViolation unless the board is bottom-packed (and full) with in-range colors."""
    board = get_board(world)
    if len(board.grid) != board.cols or any(len(column) != board.rows for column in board.grid):
        raise InvariantViolation("board dimensions changed")
    for x in range(board.cols):
        if not column_is_packed(world, x):
            raise InvariantViolation(f"column {x} is not bottom-packed")
        for y in range(board.rows):
            entity = board.grid[x][y]
            cell: Cell = world.component_for_entity(entity, Cell)
            position: BoardPosition = world.component_for_entity(entity, BoardPosition)
            if (position.x, position.y) != (x, y):
                raise InvariantViolation(f"cell at {(x, y)} records position {(position.x, position.y)}")
            if cell.empty:
                if require_full:
                    raise InvariantViolation(f"cell {(x, y)} is empty at rest")
                continue
            if not 0 <= cell.color_index < board.palette_size:
                raise InvariantViolation(f"cell {(x, y)} has color {cell.color_index} outside palette")
