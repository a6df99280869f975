"""Game state resource describing the active high-level mode."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """High-level modes that decide whether taps are accepted."""
    SETUP = auto()
    PLAYING = auto()
    RESOLVING = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the active mode and the external input gate."""
    mode: GameMode = GameMode.SETUP
    input_active: bool = True
    restart_timer: float = 0.0
