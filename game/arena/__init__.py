"""Office arena - top-down item-throwing arena simulation and its Gymnasium environment"""

from .world import World, RoundResult, Scheduler
from .notifications import GameEvent, Notification
from .orchestrator import PlayerInput, tick, run_ticks, reset_round, end_round, new_world
from .arena_env import ArenaEnv, run_random_episode

__all__ = [
    'World', 'RoundResult', 'Scheduler',
    'GameEvent', 'Notification',
    'PlayerInput', 'tick', 'run_ticks', 'reset_round', 'end_round', 'new_world',
    'ArenaEnv', 'run_random_episode',
]
