"""
ArenaEnv - Gymnasium wrapper around the office arena simulation
---------------------------------------------------------------
- The simulation core (game.arena.orchestrator) does all the work; this
  class only translates actions into PlayerInput and world state into
  observations and rewards
- Gymnasium API
- 1 RL agent (the player) that moves and throws whatever it is holding
- 6 bots fighting each other and the player, a manager boss, world events
- Vector observation: player state + event flags + top-K nearest bots
  + top-M nearest resting items + manager + haunted printer
- MultiDiscrete action space: [move(9), throw(2)]

Quick test:
    python -m game.arena.arena_env
"""

from __future__ import annotations

import math
import time
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import ARENA_HEIGHT, ARENA_WIDTH, BOT_COUNT, INVENTORY_CAPACITY, MANAGER_HEALTH
from .notifications import GameEvent
from .orchestrator import PlayerInput, reset_round, tick
from .utils import clamp, seed_everything
from .world import World

DEFAULT_REWARD_CONFIG = {
    "R_KILL": 1.0,         # Knocking out a bot with a thrown item
    "R_PICKUP": 0.05,      # Picking up an item
    "R_THROW": 0.01,       # Penalty per throw (encourage aimed throws)
    "R_DAMAGE": 0.02,      # Penalty per health point lost
    "R_DEATH": 3.0,        # Player knocked out
    "R_MANAGER_HIT": 0.5,  # Each hit point taken off the manager
    "R_WIN": 10.0,         # Manager defeated, round won
    "R_TIME": 0.001,       # Small time penalty
}


class ArenaEnv(gym.Env):
    """Office arena environment: the agent plays the human player"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = ARENA_WIDTH,
        height: int = ARENA_HEIGHT,
        bot_count: int = BOT_COUNT,
        max_steps: int = 3600,  # 60s at 60 ticks/s
        k_bots: int = 4,
        m_items: int = 3,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode {render_mode!r}")
        self.render_mode = render_mode

        self.width = width
        self.height = height
        self.bot_count = bot_count
        self.max_steps = max_steps

        # Observation config
        self.k_bots = k_bots
        self.m_items = m_items

        self.reward_config = dict(DEFAULT_REWARD_CONFIG)
        if reward_config:
            self.reward_config.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        # Action space:
        # move: 0 stay, 1..8 compass directions starting east, clockwise on screen
        # throw: 0/1 (a throw fires when this goes 0 -> 1)
        self.action_space = spaces.MultiDiscrete([9, 2])

        # Observation space (vector)
        # Player: pos(2) vel(2) health(1) items(1)
        # Events: slow(1) evacuation(1)
        # Each bot: rel pos(2) health(1) targets-player(1)
        # Each item: rel pos(2) damage(1)
        # Manager: present(1) rel pos(2) health(1)
        # Printer: present(1) rel pos(2)
        obs_dim = 6 + 2 + (self.k_bots * 4) + (self.m_items * 3) + 4 + 3
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self.world: World = World(width=width, height=height, bot_count=bot_count)

        self._step_count = 0
        self._events: Dict[str, float] = {}

        # Precompute move directions (8-way)
        self._move_dirs = [(0.0, 0.0)]
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._move_dirs.append((math.cos(ang), math.sin(ang)))

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        world_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.world = World(
            width=self.width,
            height=self.height,
            bot_count=self.bot_count,
            seed=world_seed,
        )
        reset_round(self.world)
        self._step_count = 0
        self._events = {}

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        move, throw = int(action[0]), int(action[1])
        dx, dy = self._move_dirs[move % 9]

        player = self.world.player
        health_before = player.health if player.alive else 0
        manager = self.world.manager
        manager_before = manager.health if manager is not None else None

        notes = tick(self.world, PlayerInput(dx, dy, throw == 1))
        self._collect_events(notes, health_before, manager_before)

        reward = self._compute_reward()

        # Termination
        terminated = bool(self.world.result is not None and self.world.result.won)
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Reward bookkeeping
    # ----------------------------

    def _collect_events(self, notes, health_before: int, manager_before: Optional[int]):
        world = self.world
        player = world.player
        ev = {"kill": 0.0, "pickup": 0.0, "throw": 0.0, "damage": 0.0,
              "death": 0.0, "manager_hit": 0.0, "win": 0.0}

        for note in notes:
            if note.kind is GameEvent.KILL_SCORED:
                ev["kill"] += 1.0
            elif note.kind is GameEvent.PLAYER_KO:
                ev["death"] += 1.0
            elif note.kind is GameEvent.ROUND_WON:
                ev["win"] += 1.0
            # The picked item may already be thrown again by now
            elif note.kind is GameEvent.ITEM_PICKED_UP and note.actor is player:
                ev["pickup"] += 1.0
            elif note.kind is GameEvent.ITEM_THROWN and note.subject.owner is player:
                ev["throw"] += 1.0

        # Respawns restore health, so only count losses
        ev["damage"] = float(max(0, health_before - player.health))

        manager = world.manager
        if manager is not None and manager_before is not None:
            ev["manager_hit"] = float(max(0, manager_before - manager.health))

        self._events = ev

    def _compute_reward(self) -> float:
        rc = self.reward_config
        reward = 0.0

        reward += rc["R_KILL"] * self._events.get("kill", 0.0)
        reward += rc["R_PICKUP"] * self._events.get("pickup", 0.0)
        reward += rc["R_MANAGER_HIT"] * self._events.get("manager_hit", 0.0)
        reward += rc["R_WIN"] * self._events.get("win", 0.0)

        reward -= rc["R_THROW"] * self._events.get("throw", 0.0)
        reward -= rc["R_DAMAGE"] * self._events.get("damage", 0.0)
        reward -= rc["R_DEATH"] * self._events.get("death", 0.0)
        reward -= rc["R_TIME"]

        return float(reward)

    # ----------------------------
    # Observation / info
    # ----------------------------

    def _rel(self, x: float, y: float):
        p = self.world.player
        return clamp((x - p.x) / self.width, -1, 1), clamp((y - p.y) / self.height, -1, 1)

    def _get_obs(self) -> np.ndarray:
        world = self.world
        p = world.player
        speed = max(1e-6, p.speed)

        obs_parts = [
            (p.x / self.width) * 2 - 1,
            (p.y / self.height) * 2 - 1,
            clamp(p.vx / speed, -1, 1),
            clamp(p.vy / speed, -1, 1),
            (p.health / p.max_health) * 2 - 1 if p.alive else -1.0,
            (len(p.inventory) / INVENTORY_CAPACITY) * 2 - 1,
            1.0 if world.events.slow_field_active else 0.0,
            1.0 if world.events.evacuation_active else 0.0,
        ]

        # Bots: top-K nearest live ones
        bots_sorted = sorted(
            world.live_bots(),
            key=lambda b: (b.x - p.x) ** 2 + (b.y - p.y) ** 2
        )
        for i in range(self.k_bots):
            if i < len(bots_sorted):
                b = bots_sorted[i]
                dx, dy = self._rel(b.x, b.y)
                obs_parts += [
                    dx,
                    dy,
                    (b.health / b.max_health) * 2 - 1,
                    1.0 if b.target is p else 0.0,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        # Items: top-M nearest resting ones
        items_sorted = sorted(
            world.resting_items(),
            key=lambda it: (it.x - p.x) ** 2 + (it.y - p.y) ** 2
        )
        for i in range(self.m_items):
            if i < len(items_sorted):
                it = items_sorted[i]
                dx, dy = self._rel(it.x, it.y)
                obs_parts += [dx, dy, it.spec.damage / 50.0]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        mgr = world.manager
        if mgr is not None and mgr.alive:
            dx, dy = self._rel(mgr.x, mgr.y)
            obs_parts += [1.0, dx, dy, mgr.health / MANAGER_HEALTH]
        else:
            obs_parts += [0.0, 0.0, 0.0, 0.0]

        hazard = world.hazard
        if hazard is not None:
            dx, dy = self._rel(hazard.x, hazard.y)
            obs_parts += [1.0, dx, dy]
        else:
            obs_parts += [0.0, 0.0, 0.0]

        obs = np.clip(np.array(obs_parts, dtype=np.float32), -1.0, 1.0)
        return obs

    def _get_info(self) -> Dict[str, Any]:
        info = self.world.snapshot()
        info["step"] = self._step_count
        info["won"] = bool(self.world.result is not None and self.world.result.won)
        return info

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            # Imported here so headless training never loads a GL context
            from .viewer import ArenaWindow
            self._window = ArenaWindow(
                self.world,
                visible=self.render_mode == "human",
            )
        self._window.world = self.world

        if self.render_mode == "human":
            self._window.dispatch_events()
            self._window.on_draw()
            self._window.flip()
            return None
        return self._window.capture()

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: int = 42, max_steps: Optional[int] = None):
    """Run a random episode for testing"""
    kwargs = {} if max_steps is None else {"max_steps": max_steps}
    env = ArenaEnv(render_mode="human" if render else None, **kwargs)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... Close the window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f}")
    print(f"Kills: {info['kills']}  Steps: {info['step']}  Won: {info['won']}")

    env.close()
    return total, info


if __name__ == "__main__":
    # Use: python -m game.arena.arena_env
    run_random_episode(render=True)
