from typing import Any, Callable, Iterable

from esper import World

from blast.animation_factory import AnimationFactory
from blast.components.animation_fade import FadeAnimation
from blast.components.animation_fall import FallAnimation
from blast.components.animation_hold import HoldAnimation
from blast.components.animation_refill import RefillAnimation
from blast.components.duration import Duration
from blast.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_INITIALIZED,
    EVENT_PIPELINE_CANCELLED,
    EVENT_TICK,
    EventBus,
)

TWEEN_COMPONENTS = (FadeAnimation, FallAnimation, RefillAnimation, HoldAnimation)


class AnimationSystem:
    """Drives tween timing for the view and acknowledges each pipeline phase.

    Every phase request (EVENT_ANIMATION_START) spawns one animation entity per
    item; once the whole group finishes, EVENT_ANIMATION_COMPLETE is emitted
    with the same kind. Requests with nothing to animate are acknowledged at
    once.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.factory = AnimationFactory(world)
        self._starters = {
            'blast': self.factory.create_fade_group,
            'collapse': self.factory.create_fall_group,
            'refill': self.factory.create_refill_group,
        }
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_PIPELINE_CANCELLED, self.on_reset)
        event_bus.subscribe(EVENT_BOARD_INITIALIZED, self.on_reset)

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind')
        items = kwargs.get('items') or []
        if kind == 'shuffle':
            self.factory.create_hold(kind)
            return
        starter = self._starters.get(kind)
        if starter and items:
            starter(items)
            return
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=items)

    def on_reset(self, sender, **kwargs):
        """Drop in-flight tweens; their acks belong to a run that no longer exists."""
        for component in TWEEN_COMPONENTS:
            self._delete(ent for ent, _ in list(self.world.get_component(component)))

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self._advance(FadeAnimation, 'blast', dt, lambda fade: fade.pos)
        self._advance(
            FallAnimation,
            'collapse',
            dt,
            lambda fall: {'x': fall.x, 'from': fall.from_y, 'to': fall.to_y},
        )
        self._advance(RefillAnimation, 'refill', dt, lambda refill: refill.pos)
        for ent, hold in list(self.world.get_component(HoldAnimation)):
            if not self.world.entity_exists(ent):
                continue
            hold.elapsed += dt
            if hold.elapsed >= self.world.component_for_entity(ent, Duration).value:
                self._delete([ent])
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=hold.kind, items=[])

    def fall_offset(self, x: int, y: int) -> float:
        """Rows still to fall for the cell landing at (x, y); 0 when settled."""
        for _, fall in self.world.get_component(FallAnimation):
            if fall.x == x and fall.to_y == y:
                return (fall.from_y - fall.to_y) * (1.0 - fall.progress)
        return 0.0

    def _advance(self, component: type, kind: str, dt: float, describe: Callable[[Any], Any]) -> None:
        # A group acks only once its slowest member has finished.
        group = list(self.world.get_component(component))
        if not group:
            return
        for ent, anim in group:
            duration = self.world.component_for_entity(ent, Duration).value
            anim.progress = min(1.0, anim.progress + dt / duration)
        if any(anim.progress < 1.0 for _, anim in group):
            return
        items = [describe(anim) for _, anim in group]
        self._delete(ent for ent, _ in group)
        self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=items)

    def _delete(self, ents: Iterable[int]) -> None:
        for ent in list(ents):
            self.world.delete_entity(ent, immediate=True)
