from dataclasses import dataclass
from typing import Any, Optional

EMPTY_COLOR = -1

@dataclass(slots=True)
class Cell:
    """Logical cell state.

    ``empty`` is tracked alongside ``color_index`` (which is -1 when empty).
    ``view_handle`` is borrowed from the view layer; the core clears it on
    blast and never dereferences it.
    """
    color_index: int = EMPTY_COLOR
    empty: bool = True
    view_handle: Optional[Any] = None

    def fill(self, color_index: int) -> None:
        self.color_index = color_index
        self.empty = False

    def clear(self) -> Optional[Any]:
        handle = self.view_handle
        self.color_index = EMPTY_COLOR
        self.empty = True
        self.view_handle = None
        return handle
