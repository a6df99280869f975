from blast.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TAP
from blast.systems.board_ops import board_dimensions
from blast.ui.layout import cell_at_point

LEFT_BUTTON = 1


class InputSystem:
    """Turns left mouse presses over the board into EVENT_TAP cell coordinates."""

    def __init__(self, event_bus: EventBus, window, world):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button', LEFT_BUTTON)
        if x is None or y is None or button != LEFT_BUTTON:
            return
        dims = board_dimensions(self.world)
        if not dims:
            return
        cols, rows = dims
        cell = cell_at_point(x, y, self.window.width, self.window.height, cols, rows)
        if cell is None:
            return
        self.event_bus.emit(EVENT_TAP, x=cell[0], y=cell[1])
