"""
Item and entity (re)spawning
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from .config import RESPAWN_DELAY_TICKS, SPAWN_MIN_DISTANCE
from .entities import AIState, Combatant, EntityKind, Item, ItemType, Knockback
from .utils import clamp, distance

if TYPE_CHECKING:
    from .world import World

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def spawn_item_at_spot(world: "World", spot_index: int) -> Item:
    """Create a random item resting at the given spot and add it to the world"""
    item_type = world.rng.choice(list(ItemType))
    x, y = world.item_spots[spot_index]
    item = Item(item_type=item_type, x=x, y=y, spot_index=spot_index)
    world.items.append(item)
    return item


def respawn_picked_items(world: "World") -> List[Item]:
    """
    Refill every spot left without a resting item.

    Held items let go of their spot first. A spot can also be empty because
    its item was picked up and thrown within the same update.
    """
    for item in world.items:
        if item.held_by is not None:
            item.spot_index = None
    occupied = {item.spot_index for item in world.items if item.held_by is None}

    fresh = []
    for idx in range(len(world.item_spots)):
        if idx not in occupied:
            fresh.append(spawn_item_at_spot(world, idx))
    return fresh


def drop_inventory(world: "World", entity: Combatant):
    """Held items vanish with their holder's knockout"""
    for item in entity.inventory:
        item.held_by = None
        if item in world.items:
            world.items.remove(item)
    entity.inventory = []


def valid_spawn_points(
    world: "World",
    min_distance: float = SPAWN_MIN_DISTANCE,
    exclude: Optional[Combatant] = None,
) -> List[Point]:
    """Obstacle-free grid points at least `min_distance` from every live combatant"""
    used = [(e.x, e.y) for e in world.live_combatants() if e is not exclude]
    if min_distance <= 0 or not used:
        return list(world.spawn_points)
    return [
        p for p in world.spawn_points
        if all(distance(p[0], p[1], ux, uy) >= min_distance for ux, uy in used)
    ]


def pick_spawn_point(world: "World", exclude: Optional[Combatant] = None) -> Point:
    """
    Choose a spawn point, relaxing the distance constraint when the arena is crowded.

    Tries the full clearance, then half of it, then obstacle clearance only.
    An arena too small to hold any grid point falls back to its centre.
    """
    for min_distance in (SPAWN_MIN_DISTANCE, SPAWN_MIN_DISTANCE / 2, 0.0):
        candidates = valid_spawn_points(world, min_distance, exclude=exclude)
        if candidates:
            if min_distance < SPAWN_MIN_DISTANCE:
                logger.warning("Spawn clearance relaxed to %.0f units", min_distance)
            return world.rng.choice(candidates)

    logger.warning("No spawn point in a %dx%d arena, using the centre", world.width, world.height)
    return world.width / 2, world.height / 2


def respawn(world: "World", entity: Combatant) -> None:
    """Bring a knocked-out combatant back at a fresh point with full health"""
    world.respawn_handles.pop(entity, None)
    x, y = pick_spawn_point(world, exclude=entity)
    entity.x = clamp(x, entity.radius, world.width - entity.radius)
    entity.y = clamp(y, entity.radius, world.height - entity.radius)
    entity.vx = entity.vy = 0.0
    entity.health = entity.max_health
    drop_inventory(world, entity)
    entity.knockback = Knockback()
    entity.wobble = 0
    entity.alive = True

    if entity.kind is EntityKind.BOT:
        entity.target = None
        entity.ai_timer = 0
        entity.ai_state = AIState.WANDER

    logger.debug("Respawned %s at (%.0f, %.0f)", entity.name, entity.x, entity.y)


def schedule_respawn(world: "World", entity: Combatant, delay: int = RESPAWN_DELAY_TICKS) -> int:
    handle = world.scheduler.schedule(
        world.tick_count + delay,
        lambda: respawn(world, entity),
        label=f"respawn:{entity.name}",
    )
    world.respawn_handles[entity] = handle
    return handle


def cancel_respawn(world: "World", entity: Combatant) -> bool:
    handle = world.respawn_handles.pop(entity, None)
    if handle is None:
        return False
    return world.scheduler.cancel(handle)
