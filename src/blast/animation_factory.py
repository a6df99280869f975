from typing import Any, Iterable, List, Mapping, Tuple

from esper import World

from blast.components.animation_fade import FadeAnimation
from blast.components.animation_fall import FallAnimation
from blast.components.animation_hold import HoldAnimation
from blast.components.animation_refill import RefillAnimation
from blast.components.duration import Duration
from blast.constants import BLAST_DURATION, FALL_DURATION, SHUFFLE_DURATION, SPAWN_DURATION


class AnimationFactory:
    """Spawns one tween entity per animated item, each carrying its own Duration."""

    def __init__(self, world: World):
        self.world = world

    def _spawn(self, component: Any, duration: float) -> int:
        return self.world.create_entity(component, Duration(duration))

    def create_fade_group(self, positions: Iterable[Tuple[int, int]], duration: float = BLAST_DURATION) -> List[int]:
        return [self._spawn(FadeAnimation(pos=tuple(pos)), duration) for pos in positions]

    def create_fall_group(self, moves: Iterable[Mapping[str, int]], duration: float = FALL_DURATION) -> List[int]:
        return [
            self._spawn(FallAnimation(x=move['x'], from_y=move['from'], to_y=move['to']), duration)
            for move in moves
        ]

    def create_refill_group(self, positions: Iterable[Tuple[int, int]], duration: float = SPAWN_DURATION) -> List[int]:
        return [self._spawn(RefillAnimation(pos=tuple(pos)), duration) for pos in positions]

    def create_hold(self, kind: str, duration: float = SHUFFLE_DURATION) -> int:
        return self._spawn(HoldAnimation(kind=kind), duration)
