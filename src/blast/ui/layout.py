from typing import Optional, Tuple

from blast.constants import BOARD_MAX_HEIGHT_PCT, BOARD_MAX_WIDTH_PCT, BOTTOM_MARGIN, HUD_HEIGHT


def compute_board_geometry(window_width: int, window_height: int, cols: int, rows: int):
    """Return (tile_size, start_x, start_y) for a board centred horizontally above the bottom margin.

    Shared by rendering and input so hit-testing matches what is drawn.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HUD_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_by_w = max_board_w / cols
    tile_by_h = max_board_h / rows
    tile_size = int(min(tile_by_w, tile_by_h))
    if tile_size < 20:
        tile_size = 20
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(
    px: float, py: float, window_width: int, window_height: int, cols: int, rows: int
) -> Optional[Tuple[int, int]]:
    """Map a window point to board coordinates, or None when it misses the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, cols, rows)
    if px < start_x or py < start_y:
        return None
    x = int((px - start_x) // tile_size)
    y = int((py - start_y) // tile_size)
    if x >= cols or y >= rows:
        return None
    return x, y
