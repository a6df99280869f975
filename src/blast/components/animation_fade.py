from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class FadeAnimation:
    """Blasted cell fading out at ``pos``."""
    pos: Tuple[int, int]
    progress: float = 0.0

    @property
    def alpha(self) -> float:
        return 1.0 - self.progress
