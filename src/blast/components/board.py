from dataclasses import dataclass, field
from typing import List

@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    palette_size: int
    # Cell entity ids indexed [x][y]; y=0 is the bottom row.
    grid: List[List[int]] = field(default_factory=list, repr=False)
