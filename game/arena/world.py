"""
World aggregate: the single mutable state shared by every arena component.

Components never copy the world; they receive it by reference and mutate it
in place. Deferred one-shot work (respawns, message expiry, the manager
defeat transition) goes through a tick-keyed queue instead of wall-clock
timers, so a seeded run replays identically.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import ARENA_HEIGHT, ARENA_WIDTH, BOT_COUNT
from .entities import Body, Bot, Combatant, HauntedPrinter, Item, Manager, Obstacle, Player, Projectile
from .events import EventState
from .notifications import GameEvent, Notification

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Final score handed to a leaderboard collaborator"""
    score: int
    elapsed_ticks: int
    won: bool = False


@dataclass(order=True)
class _Scheduled:
    due: int
    seq: int
    action: Callable[[], None] = field(compare=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """One-shot callbacks keyed by the tick they become due"""

    def __init__(self):
        self._queue: List[_Scheduled] = []
        self._entries: Dict[int, _Scheduled] = {}
        self._seq = itertools.count()

    def schedule(self, due_tick: int, action: Callable[[], None], label: str = "") -> int:
        entry = _Scheduled(due=due_tick, seq=next(self._seq), action=action, label=label)
        heapq.heappush(self._queue, entry)
        self._entries[entry.seq] = entry
        return entry.seq

    def cancel(self, handle: int) -> bool:
        entry = self._entries.pop(handle, None)
        if entry is None:
            return False
        entry.cancelled = True
        return True

    def drain(self, now: int) -> int:
        """Run every callback due at or before `now`, in (due, insertion) order"""
        ran = 0
        while self._queue and self._queue[0].due <= now:
            entry = heapq.heappop(self._queue)
            if entry.cancelled:
                continue
            self._entries.pop(entry.seq, None)
            entry.action()
            ran += 1
        return ran

    def pending(self) -> List[Tuple[int, str]]:
        return sorted((e.due, e.label) for e in self._entries.values())

    def clear(self):
        self._queue.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class World:
    """Everything the arena simulation reads and writes"""

    def __init__(
        self,
        width: int = ARENA_WIDTH,
        height: int = ARENA_HEIGHT,
        bot_count: int = BOT_COUNT,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")
        if bot_count < 0:
            raise ValueError(f"Bot count must be non-negative, got {bot_count}")

        self.width = width
        self.height = height
        self.bot_count = bot_count
        self.rng = rng if rng is not None else random.Random(seed)
        self._pending_size: Optional[Tuple[int, int]] = None

        # Entities
        self.player: Optional[Player] = None
        self.bots: List[Bot] = []
        self.manager: Optional[Manager] = None
        self.items: List[Item] = []
        self.projectiles: List[Projectile] = []

        # Static layout
        self.obstacles: List[Obstacle] = []
        self.item_spots: List[Tuple[float, float]] = []
        self.spawn_points: List[Tuple[float, float]] = []

        # Round state
        self.tick_count = 0
        self.kills = 0
        self.events = EventState()
        self.scheduler = Scheduler()
        self.manager_spawn_timer = 0
        self.manager_defeated = False
        self.manager_melee_cooldown = 0
        self.round_over = False
        self.result: Optional[RoundResult] = None

        # Previous-tick alive state, used to fire KO notifications once
        self.alive_snapshot: Dict[Body, bool] = {}
        self.respawn_handles: Dict[Combatant, int] = {}
        self.throw_latched = False

        self.tick_events: List[Notification] = []
        self._listeners: List[Callable[[Notification], None]] = []

    # ----------------------------
    # Queries
    # ----------------------------

    @property
    def hazard(self) -> Optional[HauntedPrinter]:
        return self.events.hazard

    def combatants(self) -> List[Combatant]:
        """Player first, then bots in creation order"""
        out: List[Combatant] = [self.player] if self.player is not None else []
        return out + list(self.bots)

    def live_combatants(self) -> List[Combatant]:
        return [e for e in self.combatants() if e.alive]

    def live_bots(self, exclude: Optional[Bot] = None) -> List[Bot]:
        return [b for b in self.bots if b.alive and b is not exclude]

    def resting_items(self) -> List[Item]:
        return [i for i in self.items if i.held_by is None]

    # ----------------------------
    # Round boundary helpers
    # ----------------------------

    def resize(self, width: int, height: int):
        """Request a new arena size; applied by the next round reset"""
        if width <= 0 or height <= 0:
            raise ValueError(f"Arena size must be positive, got {width}x{height}")
        self._pending_size = (width, height)

    def apply_pending_size(self) -> bool:
        if self._pending_size is None:
            return False
        self.width, self.height = self._pending_size
        self._pending_size = None
        return True

    def finish(self, won: bool = False) -> RoundResult:
        """Freeze the world; later ticks are no-ops"""
        if self.result is None:
            self.round_over = True
            self.result = RoundResult(score=self.kills, elapsed_ticks=self.tick_count, won=won)
            logger.debug("Round over at tick %d (score=%d, won=%s)", self.tick_count, self.kills, won)
        return self.result

    # ----------------------------
    # Notifications
    # ----------------------------

    def subscribe(self, callback: Callable[[Notification], None]):
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[Notification], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def emit(self, kind: GameEvent, subject: Any = None, actor: Any = None) -> Notification:
        note = Notification(kind=kind, tick=self.tick_count, subject=subject, actor=actor)
        self.tick_events.append(note)
        for callback in list(self._listeners):
            callback(note)
        return note

    def snapshot(self) -> Dict[str, Any]:
        """Read-only summary for a render consumer or an info dict"""
        return {
            "tick": self.tick_count,
            "kills": self.kills,
            "player_health": self.player.health if self.player else 0,
            "player_alive": bool(self.player and self.player.alive),
            "player_items": len(self.player.inventory) if self.player else 0,
            "bots_alive": len(self.live_bots()),
            "items": len(self.items),
            "projectiles": len(self.projectiles),
            "active_events": [e.value for e in self.events.active()],
            "event_message": self.events.message,
            "manager_alive": bool(self.manager and self.manager.alive),
            "manager_health": self.manager.health if self.manager else 0,
            "round_over": self.round_over,
        }
