"""
Timed world events (coffee flood, fire drill, haunted printer) and the
manager's spawn countdown
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .config import (
    EVACUATION_TICKS,
    EVENT_INTERVAL_TICKS,
    EVENT_MESSAGE_TICKS,
    HAZARD_RADIUS,
    HAZARD_SPEED,
    HAZARD_TICKS,
    MANAGER_EDGE_INSET,
    SLOW_FIELD_FACTOR,
    SLOW_FIELD_TICKS,
)
from .entities import HauntedPrinter, Manager
from .notifications import GameEvent
from .utils import clamp

if TYPE_CHECKING:
    from .world import World

logger = logging.getLogger(__name__)


class WorldEvent(Enum):
    SLOW_FIELD = "coffee"
    EVACUATION = "fire"
    HAUNTED_PRINTER = "printer"


EVENT_MESSAGES = {
    WorldEvent.SLOW_FIELD: "Coffee Flood! Everyone moves slow!",
    WorldEvent.EVACUATION: "Fire Drill! Bots run for exits!",
    WorldEvent.HAUNTED_PRINTER: "Haunted Printer! Avoid the printer!",
}


@dataclass
class EventState:
    countdown: int = EVENT_INTERVAL_TICKS
    slow_field_ticks: int = 0
    evacuation_ticks: int = 0
    hazard: Optional[HauntedPrinter] = None
    current: Optional[WorldEvent] = None
    message: Optional[str] = None
    message_serial: int = 0

    @property
    def slow_field_active(self) -> bool:
        return self.slow_field_ticks > 0

    @property
    def evacuation_active(self) -> bool:
        return self.evacuation_ticks > 0

    @property
    def speed_factor(self) -> float:
        return SLOW_FIELD_FACTOR if self.slow_field_active else 1.0

    def active(self) -> List[WorldEvent]:
        out = []
        if self.slow_field_active:
            out.append(WorldEvent.SLOW_FIELD)
        if self.evacuation_active:
            out.append(WorldEvent.EVACUATION)
        if self.hazard is not None:
            out.append(WorldEvent.HAUNTED_PRINTER)
        return out


def trigger_event(world: "World", kind: Optional[WorldEvent] = None) -> WorldEvent:
    """Start a world event (random when `kind` is None) and show its message for a while"""
    ev = world.events
    if kind is None:
        kind = world.rng.choice(list(WorldEvent))

    if kind is WorldEvent.SLOW_FIELD:
        ev.slow_field_ticks = SLOW_FIELD_TICKS
    elif kind is WorldEvent.EVACUATION:
        ev.evacuation_ticks = EVACUATION_TICKS
    elif kind is WorldEvent.HAUNTED_PRINTER:
        angle = world.rng.random() * math.pi * 2
        ev.hazard = HauntedPrinter(
            x=world.width / 2,
            y=world.height / 2,
            vx=math.cos(angle) * HAZARD_SPEED,
            vy=math.sin(angle) * HAZARD_SPEED,
            ticks=HAZARD_TICKS,
        )

    ev.current = kind
    ev.message = EVENT_MESSAGES[kind]
    ev.message_serial += 1
    serial = ev.message_serial
    world.scheduler.schedule(
        world.tick_count + EVENT_MESSAGE_TICKS,
        lambda: _clear_message(world, serial),
        label=f"message:{kind.value}",
    )
    logger.debug("World event %s started at tick %d", kind.value, world.tick_count)
    world.emit(GameEvent.WORLD_EVENT_STARTED, kind)
    return kind


def _clear_message(world: "World", serial: int):
    ev = world.events
    if ev.message_serial == serial:
        ev.message = None
        ev.current = None


def _move_hazard(world: "World", hazard: HauntedPrinter):
    # Bounces off the arena bounds only; obstacles do not stop it
    hazard.x += hazard.vx
    hazard.y += hazard.vy
    if hazard.x < HAZARD_RADIUS or hazard.x > world.width - HAZARD_RADIUS:
        hazard.vx = -hazard.vx
        hazard.x = clamp(hazard.x, HAZARD_RADIUS, world.width - HAZARD_RADIUS)
    if hazard.y < HAZARD_RADIUS or hazard.y > world.height - HAZARD_RADIUS:
        hazard.vy = -hazard.vy
        hazard.y = clamp(hazard.y, HAZARD_RADIUS, world.height - HAZARD_RADIUS)
    hazard.ticks -= 1


def update_events(world: "World"):
    """Advance event durations and fire the next event when the round timer runs out"""
    ev = world.events
    if ev.slow_field_ticks > 0:
        ev.slow_field_ticks -= 1
    if ev.evacuation_ticks > 0:
        ev.evacuation_ticks -= 1
    if ev.hazard is not None:
        _move_hazard(world, ev.hazard)
        if ev.hazard.ticks <= 0:
            ev.hazard = None

    ev.countdown -= 1
    if ev.countdown <= 0:
        trigger_event(world)
        ev.countdown = EVENT_INTERVAL_TICKS


# ----------------------------
# Manager spawning
# ----------------------------

def spawn_manager(world: "World") -> Manager:
    """Place the manager on a random arena edge"""
    rng = world.rng
    edge = rng.randint(0, 3)
    inset = MANAGER_EDGE_INSET
    if edge < 2:
        x = inset if edge == 0 else world.width - inset
        y = rng.randint(60, max(60, world.height - 60))
    else:
        x = rng.randint(60, max(60, world.width - 60))
        y = inset if edge == 2 else world.height - inset

    world.manager = Manager(x=float(x), y=float(y))
    world.manager_melee_cooldown = 0
    logger.debug("Manager spawned at (%d, %d) on tick %d", x, y, world.tick_count)
    world.emit(GameEvent.MANAGER_SPAWNED, world.manager)
    return world.manager


def update_manager_spawn(world: "World") -> Optional[Manager]:
    """Count down to the one manager appearance of the round"""
    if world.manager is not None or world.manager_defeated:
        return None
    world.manager_spawn_timer -= 1
    if world.manager_spawn_timer <= 0:
        return spawn_manager(world)
    return None
