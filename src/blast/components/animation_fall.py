from dataclasses import dataclass

@dataclass(slots=True)
class FallAnimation:
    x: int
    from_y: int
    to_y: int
    progress: float = 0.0  # 0..1
