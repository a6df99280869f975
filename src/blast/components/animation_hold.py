from dataclasses import dataclass

@dataclass(slots=True)
class HoldAnimation:
    """Timed pause acknowledging a phase with nothing to tween (e.g. a shuffle flash)."""
    kind: str
    elapsed: float = 0.0
