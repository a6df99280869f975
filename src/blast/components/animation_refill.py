from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class RefillAnimation:
    pos: Tuple[int, int]
    progress: float = 0.0
