from dataclasses import dataclass

from blast.constants import COMBO_TIMEOUT, MULTIPLIER_LEVELS


@dataclass(slots=True)
class ScoreState:
    """Score, move budget and combo counters owned by the ScoreSystem."""
    max_moves: int
    score: int = 0
    moves_left: int = 0
    multiplier_index: int = 0
    last_move_time: float = 0.0
    combo_timeout: float = COMBO_TIMEOUT
    game_over: bool = False

    @property
    def multiplier(self) -> float:
        return MULTIPLIER_LEVELS[self.multiplier_index]
