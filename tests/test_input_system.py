from blast.events.bus import EVENT_MOUSE_PRESS, EVENT_TAP, EventBus
from blast.systems.board_ops import create_board
from blast.systems.input import InputSystem
from blast.ui.layout import cell_at_point, compute_board_geometry
from blast.world import create_world
from tests.helpers import EventRecorder


class DummyWindow:
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height


def _setup(cols=4, rows=4):
    bus = EventBus()
    world = create_world(bus)
    create_board(world, cols, rows, 3)
    window = DummyWindow()
    InputSystem(bus, window, world)
    return bus, world, window


def test_geometry_fits_board_above_bottom_margin():
    tile_size, start_x, start_y = compute_board_geometry(800, 600, 4, 4)
    assert tile_size == 100
    assert start_x == 200
    assert start_y == 20


def test_cell_at_point_maps_corners_and_misses():
    assert cell_at_point(250, 70, 800, 600, 4, 4) == (0, 0)
    assert cell_at_point(599, 419, 800, 600, 4, 4) == (3, 3)
    assert cell_at_point(150, 70, 800, 600, 4, 4) is None
    assert cell_at_point(650, 70, 800, 600, 4, 4) is None
    assert cell_at_point(250, 10, 800, 600, 4, 4) is None
    assert cell_at_point(250, 430, 800, 600, 4, 4) is None


def test_left_click_emits_tap_with_cell_coordinates():
    bus, _, _ = _setup()
    recorder = EventRecorder(bus, EVENT_TAP)
    bus.emit(EVENT_MOUSE_PRESS, x=355, y=275, button=1)
    assert recorder.of(EVENT_TAP) == [{'x': 1, 'y': 2}]


def test_clicks_off_board_or_other_buttons_are_ignored():
    bus, _, _ = _setup()
    recorder = EventRecorder(bus, EVENT_TAP)
    bus.emit(EVENT_MOUSE_PRESS, x=10, y=10, button=1)
    bus.emit(EVENT_MOUSE_PRESS, x=355, y=275, button=4)
    assert recorder.events == []


def test_click_before_board_exists_is_ignored():
    bus = EventBus()
    world = create_world(bus)
    InputSystem(bus, DummyWindow(), world)
    recorder = EventRecorder(bus, EVENT_TAP)
    bus.emit(EVENT_MOUSE_PRESS, x=355, y=275, button=1)
    assert recorder.events == []
