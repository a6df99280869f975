from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class PipelinePhase(Enum):
    """Phases of the blast pipeline in execution order."""
    IDLE = "idle"
    LEGALITY = "P0"
    BLAST = "P1"
    COLLAPSE = "P2"
    REFILL = "P3"
    CLASSIFY = "P4"
    DEADLOCK = "P5"


@dataclass(slots=True)
class PipelineState:
    """Tracks the pipeline run currently in flight."""

    phase: PipelinePhase = PipelinePhase.IDLE
    group: List[Tuple[int, int]] = field(default_factory=list)
    color_index: int = -1
    awaiting_ack: Optional[str] = None
    ack_elapsed: float = 0.0
    legal_groups: int = 0
    shuffles: int = 0
    runs: int = 0

    @property
    def busy(self) -> bool:
        return self.phase != PipelinePhase.IDLE
