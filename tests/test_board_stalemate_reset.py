import random
from collections import Counter

from blast.events.bus import EVENT_CELLS_RESHUFFLED, EventBus
from blast.systems.board_ops import color_counts
from blast.systems.deadlock import fisher_yates, force_adjacent_pair, is_deadlocked, resolve_deadlock
from blast.systems.group_finder import has_legal_move
from blast.world import create_world
from tests.helpers import EventRecorder, checkerboard, colors, make_board


def _world(columns, palette_size=2):
    bus = EventBus()
    world = create_world(bus, seed=11)
    make_board(world, columns, palette_size=palette_size)
    return world, bus


def test_checkerboard_is_reshuffled_into_playable_board():
    world, bus = _world(checkerboard(4, 4))
    recorder = EventRecorder(bus, EVENT_CELLS_RESHUFFLED)
    before = color_counts(world)
    assert is_deadlocked(world)
    report = resolve_deadlock(world, bus, random.Random(2024))
    assert has_legal_move(world)
    assert 1 <= report.attempts <= 100
    assert not report.forced
    assert color_counts(world) == before
    shuffles = recorder.of(EVENT_CELLS_RESHUFFLED)
    assert [p['attempt'] for p in shuffles] == list(range(1, report.attempts + 1))
    assert all(len(p['cells']) == 16 for p in shuffles)


def test_playable_board_is_left_untouched():
    world, bus = _world([[0, 0], [1, 0]])
    recorder = EventRecorder(bus, EVENT_CELLS_RESHUFFLED)
    report = resolve_deadlock(world, bus, random.Random(1))
    assert report.attempts == 0
    assert colors(world) == [[0, 0], [1, 0]]
    assert recorder.events == []


def test_cap_forces_pair_and_keeps_multiset():
    world, bus = _world(checkerboard(3, 3))
    recorder = EventRecorder(bus, EVENT_CELLS_RESHUFFLED)
    before = color_counts(world)
    report = resolve_deadlock(world, bus, random.Random(7), max_attempts=0)
    assert report.forced and report.attempts == 0
    assert has_legal_move(world)
    assert color_counts(world) == before
    assert recorder.of(EVENT_CELLS_RESHUFFLED)[-1]['forced'] is True


def test_distinct_colors_fall_back_to_repaint():
    world, bus = _world([[0, 1, 2]], palette_size=3)
    cells = force_adjacent_pair(world)
    assert cells == [(0, 1, 0)]
    assert colors(world) == [[0, 0, 2]]
    assert has_legal_move(world)


def test_distinct_colors_resolve_via_forced_pair():
    world, bus = _world([[0, 1, 2]], palette_size=3)
    report = resolve_deadlock(world, bus, random.Random(3), max_attempts=5)
    assert report.attempts == 5
    assert report.forced
    assert has_legal_move(world)


def test_fisher_yates_is_a_permutation():
    values = [0, 1, 1, 2, 3, 3, 3]
    shuffled = list(values)
    fisher_yates(shuffled, random.Random(99))
    assert Counter(shuffled) == Counter(values)
