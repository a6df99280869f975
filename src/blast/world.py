from __future__ import annotations

import random
from typing import Callable

from esper import World

from blast.components.game_state import GameMode, GameState
from blast.components.level_config import LevelConfig
from blast.components.pipeline_state import PipelineState
from blast.constants import ACK_TIMEOUT, GAME_OVER_RESTART_DELAY, MAX_SHUFFLE_ATTEMPTS
from blast.events.bus import EventBus
from blast.systems.blast_pipeline import BlastPipelineSystem
from blast.systems.game_controller import GameController
from blast.systems.score_system import ScoreSystem
from blast.utils.kv_store import KeyValueStore


def create_world(
    event_bus: EventBus,
    config: LevelConfig | None = None,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> World:
    """Create the world with its shared resources; the board is built by start_game."""
    world = World()
    setattr(world, "random", rng or random.Random(seed))
    world.create_entity(config or LevelConfig())
    world.create_entity(GameState(mode=GameMode.SETUP))
    world.create_entity(PipelineState())
    return world


def get_level_config(world: World) -> LevelConfig:
    for _, config in world.get_component(LevelConfig):
        return config
    raise RuntimeError("LevelConfig resource not found")


def create_game(
    config: LevelConfig | None = None,
    *,
    event_bus: EventBus | None = None,
    seed: int | None = None,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
    store: KeyValueStore | None = None,
    combo_timeout: float | None = None,
    ack_timeout: float = ACK_TIMEOUT,
    max_shuffle_attempts: int = MAX_SHUFFLE_ATTEMPTS,
    restart_delay: float | None = GAME_OVER_RESTART_DELAY,
) -> GameController:
    """Wire world, score system, pipeline and controller around one event bus.

    Collaborators (view, audio, UI) subscribe to ``controller.event_bus``
    before calling ``start_game``.
    """
    bus = event_bus or EventBus()
    world = create_world(bus, config, seed=seed, rng=rng)
    config = get_level_config(world)
    shared_rng = getattr(world, "random")
    score_system = ScoreSystem(
        world,
        bus,
        max_moves=config.max_moves,
        store=store,
        clock=clock,
        combo_timeout=combo_timeout,
    )
    pipeline = BlastPipelineSystem(
        world,
        bus,
        rng=shared_rng,
        ack_timeout=ack_timeout,
        max_shuffle_attempts=max_shuffle_attempts,
    )
    return GameController(
        world,
        bus,
        score_system,
        pipeline,
        config=config,
        rng=shared_rng,
        restart_delay=restart_delay,
    )
