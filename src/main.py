"""Entry point for the blast puzzle demo.

Sets up the event bus, the game core, view systems and the Arcade window.
"""
import os
from pathlib import Path

from arcade import Window, run, color
from blast.components.level_config import LevelConfig, load_level_config
from blast.events.bus import EVENT_TICK, EVENT_MOUSE_PRESS, EventBus
from blast.systems.animation import AnimationSystem
from blast.systems.input import InputSystem
from blast.systems.render import RenderSystem
from blast.utils.kv_store import JsonKeyValueStore
from blast.utils.log import configure_logging
from blast.world import create_game

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
LEVEL_ENV = "BLAST_LEVEL"


def load_config() -> LevelConfig:
    level_path = os.environ.get(LEVEL_ENV)
    if level_path:
        return load_level_config(level_path)
    return LevelConfig()


class BlastWindow(Window):
    def __init__(self, config: LevelConfig, seed: int | None = None):
        super().__init__(720, 860, "Blast")
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.controller = create_game(
            config,
            event_bus=self.event_bus,
            seed=seed,
            store=JsonKeyValueStore(DATA_DIR / "high_score.json"),
        )
        self.world = self.controller.world
        # View collaborators subscribe before the first board is generated.
        self.animation_system = AnimationSystem(self.world, self.event_bus)
        self.render_system = RenderSystem(self.world, self.event_bus, self, self.animation_system)
        self.input_system = InputSystem(self.event_bus, self, self.world)
        self.background_color = color.BLACK
        self.controller.start_game()

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)


def main():
    configure_logging()
    seed = os.environ.get("BLAST_SEED")
    BlastWindow(load_config(), seed=int(seed) if seed else None)
    run()

if __name__ == "__main__":
    main()
