import sys, os
ROOT=os.path.dirname(__file__); SRC=os.path.join(ROOT,'src');
if SRC not in sys.path: sys.path.insert(0,SRC)
from blast.constants import DEFAULT_SEED
from blast.events.bus import EventBus, EVENT_TAP, EVENT_ANIMATION_START
from blast.systems.animation import AnimationSystem
from blast.world import create_game

bus=EventBus()
controller=create_game(event_bus=bus, seed=DEFAULT_SEED)
print('Signals after create_game', bus._signals.keys(), 'receivers', bus._signals[EVENT_TAP].receivers)
AnimationSystem(controller.world,bus)
print('Animation acks wired:', bus.has_subscribers(EVENT_ANIMATION_START))
controller.start_game()
print('Mode', controller.mode.name, 'moves', controller.moves_left, 'legal groups', controller.pipeline.state.legal_groups)
