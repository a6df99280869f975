from typing import List, Tuple

# Seven distinct colors, one per palette slot.
COLOR_NAME_MAP = {
    (180, 60, 60): 'red',
    (80, 170, 80): 'green',
    (70, 90, 180): 'blue',
    (200, 190, 80): 'yellow',
    (170, 80, 160): 'magenta',
    (70, 170, 170): 'cyan',
    (200, 130, 60): 'orange',
}
PALETTE: List[Tuple[int, int, int]] = list(COLOR_NAME_MAP.keys())
EMPTY_COLOR: Tuple[int, int, int] = (40, 40, 48)


def color_for_index(color_index: int) -> Tuple[int, int, int]:
    if 0 <= color_index < len(PALETTE):
        return PALETTE[color_index]
    return EMPTY_COLOR
