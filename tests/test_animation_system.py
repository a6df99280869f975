from blast.components.animation_fade import FadeAnimation
from blast.components.animation_fall import FallAnimation
from blast.components.game_state import GameMode
from blast.errors import TapOutcome
from blast.events.bus import (
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_TICK,
    EventBus,
)
from blast.systems.animation import AnimationSystem
from blast.systems.board_ops import validate_settled
from blast.world import create_world
from tests.helpers import EventRecorder, build_game, paint_board


def drive(bus, ticks, dt=0.02):
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def _system():
    bus = EventBus()
    world = create_world(bus)
    system = AnimationSystem(world, bus)
    recorder = EventRecorder(bus, EVENT_ANIMATION_COMPLETE)
    return bus, world, system, recorder


def test_fade_group_completes_once():
    bus, world, _, recorder = _system()
    bus.emit(EVENT_ANIMATION_START, kind='blast', items=[(0, 0), (1, 0)])
    assert len(list(world.get_component(FadeAnimation))) == 2
    assert recorder.events == []
    drive(bus, 20)
    completes = recorder.of(EVENT_ANIMATION_COMPLETE)
    assert len(completes) == 1
    assert completes[0]['kind'] == 'blast'
    assert sorted(completes[0]['items']) == [(0, 0), (1, 0)]
    assert list(world.get_component(FadeAnimation)) == []


def test_fall_offset_shrinks_to_zero():
    bus, _, system, recorder = _system()
    bus.emit(EVENT_ANIMATION_START, kind='collapse', items=[{'x': 0, 'from': 3, 'to': 1}])
    assert system.fall_offset(0, 1) == 3 - 1
    drive(bus, 5)
    assert 0.0 < system.fall_offset(0, 1) < 2.0
    drive(bus, 30)
    assert system.fall_offset(0, 1) == 0.0
    assert recorder.of(EVENT_ANIMATION_COMPLETE)[0]['items'] == [{'x': 0, 'from': 3, 'to': 1}]


def test_nothing_to_animate_is_acknowledged_immediately():
    bus, world, _, recorder = _system()
    bus.emit(EVENT_ANIMATION_START, kind='collapse', items=[])
    bus.emit(EVENT_ANIMATION_START, kind='classify', items=[3, 2])
    assert [p['kind'] for p in recorder.of(EVENT_ANIMATION_COMPLETE)] == ['collapse', 'classify']
    assert list(world.get_component(FallAnimation)) == []


def test_shuffle_hold_waits_for_its_duration():
    bus, _, _, recorder = _system()
    bus.emit(EVENT_ANIMATION_START, kind='shuffle', items=[])
    drive(bus, 5)
    assert recorder.events == []
    drive(bus, 20)
    assert [p['kind'] for p in recorder.of(EVENT_ANIMATION_COMPLETE)] == ['shuffle']


def test_animations_drive_a_full_blast():
    controller, clock, _, _ = build_game(rows=3, cols=3, ack=False)
    bus = controller.event_bus
    AnimationSystem(controller.world, bus)
    controller.start_game()
    drive(bus, 60)
    assert controller.mode == GameMode.PLAYING
    paint_board(controller.world, [[0, 0, 1], [1, 2, 0], [2, 1, 2]])
    assert controller.tap(0, 0) == TapOutcome.ACCEPTED
    assert controller.input_locked, 'input stays locked while animations play'
    assert controller.tap(0, 0) == TapOutcome.INPUT_LOCKED
    drive(bus, 120)
    assert not controller.pipeline.busy
    assert controller.mode == GameMode.PLAYING
    validate_settled(controller.world)


def _blast_in_flight():
    controller, _, _, _ = build_game(rows=3, cols=3, ack=False)
    bus = controller.event_bus
    system = AnimationSystem(controller.world, bus)
    controller.start_game()
    drive(bus, 60)
    paint_board(controller.world, [[0, 0, 1], [1, 2, 0], [2, 1, 2]])
    assert controller.tap(0, 0) == TapOutcome.ACCEPTED
    assert len(list(controller.world.get_component(FadeAnimation))) == 2
    return controller, bus, system


def test_teardown_drops_running_tweens():
    controller, bus, _ = _blast_in_flight()
    recorder = EventRecorder(bus, EVENT_ANIMATION_COMPLETE)
    controller.teardown()
    assert list(controller.world.get_component(FadeAnimation)) == []
    drive(bus, 30)
    assert recorder.events == [], 'no ack may arrive for a cancelled run'


def test_restart_clears_stale_motion():
    controller, bus, system = _blast_in_flight()
    drive(bus, 6)
    assert list(controller.world.get_component(FallAnimation)), 'collapse should be animating'
    controller.start_game()
    assert list(controller.world.get_component(FallAnimation)) == []
    assert all(system.fall_offset(x, y) == 0.0 for x in range(3) for y in range(3))
    drive(bus, 60)
    assert controller.mode == GameMode.PLAYING
