from blast.events.bus import EventBus
from blast.systems.board_ops import clear_cell
from blast.systems.group_classifier import GroupTier, classify_group_size
from blast.systems.group_finder import find_all_groups, find_group, has_legal_move, legal_groups
from blast.world import create_world
from tests.helpers import checkerboard, make_board


def _world(columns, palette_size=3):
    world = create_world(EventBus(), seed=3)
    make_board(world, columns, palette_size=palette_size)
    return world


def test_group_starts_with_seed_and_spans_connected_color():
    # columns[x][y], y=0 at the bottom
    world = _world([
        [0, 0, 1],
        [1, 0, 1],
        [1, 0, 0],
    ])
    group = find_group(world, 0, 0)
    assert group[0] == (0, 0)
    assert sorted(group) == [(0, 0), (0, 1), (1, 1), (2, 1), (2, 2)]


def test_group_membership_is_symmetric():
    world = _world([
        [0, 0, 1],
        [1, 0, 1],
        [1, 0, 0],
    ])
    group = find_group(world, 0, 0)
    for x, y in group:
        assert sorted(find_group(world, x, y)) == sorted(group)


def test_diagonal_cells_are_not_connected():
    world = _world([[0, 1], [1, 0]], palette_size=2)
    assert find_group(world, 0, 0) == [(0, 0)]
    assert not has_legal_move(world)


def test_empty_or_out_of_range_seed_gives_empty_group():
    world = _world([[0, 0], [1, 1]])
    clear_cell(world, 0, 0)
    assert find_group(world, 0, 0) == []
    assert find_group(world, -1, 0) == []
    assert find_group(world, 2, 0) == []


def test_all_groups_partition_board_column_major():
    world = _world([
        [0, 0, 1],
        [2, 2, 1],
    ])
    groups = find_all_groups(world)
    assert [g[0] for g in groups] == [(0, 0), (0, 2), (1, 0)]
    covered = sorted(pos for group in groups for pos in group)
    assert covered == [(x, y) for x in range(2) for y in range(3)]
    assert len(legal_groups(world)) == 3


def test_checkerboard_has_no_legal_group():
    world = _world(checkerboard(4, 4), palette_size=2)
    assert legal_groups(world) == []
    assert not has_legal_move(world)


def test_tier_thresholds():
    assert classify_group_size(1) == GroupTier.DEFAULT
    assert classify_group_size(4) == GroupTier.DEFAULT
    assert classify_group_size(5) == GroupTier.A
    assert classify_group_size(7) == GroupTier.A
    assert classify_group_size(8) == GroupTier.B
    assert classify_group_size(9) == GroupTier.B
    assert classify_group_size(10) == GroupTier.C
    assert classify_group_size(64) == GroupTier.C
