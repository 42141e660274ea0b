"""
Combat and interaction: pickup, throwing, projectile flight and hits,
manager damage and the haunted printer's aura
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Optional

from .config import (
    HAZARD_DAMAGE,
    HAZARD_DAMAGE_RADIUS,
    HAZARD_RADIUS,
    INVENTORY_CAPACITY,
    KNOCKBACK_FORCE,
    KNOCKBACK_TICKS,
    MANAGER_DEFEAT_DELAY_TICKS,
    MANAGER_MELEE_COOLDOWN,
    MANAGER_MELEE_REACH,
    MANAGER_PROJECTILE_REACH,
    PICKUP_MARGIN,
    PROJECTILE_LIFE,
    WOBBLE_TICKS,
)
from .entities import Combatant, EntityKind, Item, Knockback, Projectile
from .notifications import GameEvent
from .utils import circle_rect_overlap, distance

if TYPE_CHECKING:
    from .world import World

logger = logging.getLogger(__name__)


# ----------------------------
# Pickup / throw
# ----------------------------

def within_pickup_range(entity: Combatant, item: Item) -> bool:
    return distance(entity.x, entity.y, item.x, item.y) < entity.radius + item.radius + PICKUP_MARGIN


def try_pickup(entity: Combatant, world: "World") -> List[Item]:
    """Grab resting items in reach, in item order, until the inventory is full"""
    picked = []
    for item in world.items:
        if len(entity.inventory) >= INVENTORY_CAPACITY:
            break
        if item.held_by is None and within_pickup_range(entity, item):
            item.held_by = entity
            entity.inventory.append(item)
            picked.append(item)
            world.emit(GameEvent.ITEM_PICKED_UP, item, actor=entity)
    return picked


def aim_angle(entity: Combatant, world: "World") -> float:
    """Player auto-aims at the nearest live bot, bots aim at their target; straight up otherwise"""
    target = None
    if entity.kind is EntityKind.PLAYER:
        bots = world.live_bots()
        if bots:
            target = min(bots, key=lambda b: distance(b.x, b.y, entity.x, entity.y))
    elif entity.kind is EntityKind.BOT:
        target = entity.target

    if target is None:
        return -math.pi / 2
    return math.atan2(target.y - entity.y, target.x - entity.x)


def throw_item(entity: Combatant, world: "World", angle: Optional[float] = None) -> Optional[Projectile]:
    """Throw the oldest held item"""
    if not entity.inventory:
        return None
    item = entity.inventory.pop(0)
    item.held_by = None
    if item in world.items:
        world.items.remove(item)

    if angle is None:
        angle = aim_angle(entity, world)
    spec = item.spec
    proj = Projectile(
        item_type=item.item_type,
        x=entity.x,
        y=entity.y,
        vx=math.cos(angle) * spec.speed,
        vy=math.sin(angle) * spec.speed,
        damage=spec.damage,
        radius=spec.radius,
        owner=entity,
        life=PROJECTILE_LIFE,
        splash=spec.splash,
    )
    world.projectiles.append(proj)
    world.emit(GameEvent.ITEM_THROWN, proj)
    return proj


# ----------------------------
# Projectiles
# ----------------------------

def apply_knockback(target: Combatant, from_x: float, from_y: float):
    ang = math.atan2(target.y - from_y, target.x - from_x)
    target.knockback = Knockback(
        x=math.cos(ang) * KNOCKBACK_FORCE,
        y=math.sin(ang) * KNOCKBACK_FORCE,
        ticks=KNOCKBACK_TICKS,
    )


def projectile_targets(proj: Projectile, world: "World") -> List[Combatant]:
    """Bots' throws hit the player or any other bot; the player's throws hit bots"""
    if proj.owner.kind is EntityKind.BOT:
        targets: List[Combatant] = []
        if world.player is not None and world.player.alive:
            targets.append(world.player)
        return targets + world.live_bots(exclude=proj.owner)
    return world.live_bots()


def _blocked(proj: Projectile, world: "World") -> bool:
    r = proj.radius
    if proj.x < r or proj.x > world.width - r or proj.y < r or proj.y > world.height - r:
        return True
    for o in world.obstacles:
        if circle_rect_overlap(proj.x, proj.y, r, o.x, o.y, o.w, o.h):
            return True
    hazard = world.hazard
    if hazard is not None and distance(proj.x, proj.y, hazard.x, hazard.y) < r + HAZARD_RADIUS:
        return True
    return False


def apply_hit(proj: Projectile, target: Combatant, world: "World"):
    before = target.take_damage(proj.damage)
    target.wobble = WOBBLE_TICKS
    apply_knockback(target, proj.x, proj.y)
    proj.life = 0

    # Only the player's knockouts of bots score
    if (
        before > 0
        and target.health <= 0
        and target.kind is EntityKind.BOT
        and proj.owner.kind is EntityKind.PLAYER
    ):
        world.kills += 1
        world.emit(GameEvent.KILL_SCORED, target)


def advance_projectiles(world: "World"):
    """Move every projectile one tick, resolve walls and hits, drop the spent ones"""
    for proj in world.projectiles:
        if not proj.alive:
            continue
        proj.x += proj.vx
        proj.y += proj.vy
        proj.life -= 1

        if _blocked(proj, world):
            proj.life = 0
            continue

        for target in projectile_targets(proj, world):
            if distance(proj.x, proj.y, target.x, target.y) < proj.radius + target.radius:
                apply_hit(proj, target, world)
                break

    world.projectiles = [p for p in world.projectiles if p.alive]


# ----------------------------
# Manager
# ----------------------------

def damage_manager(world: "World") -> bool:
    """Remove one hit point from the manager. Returns True on the defeating hit."""
    mgr = world.manager
    if mgr is None or not mgr.alive:
        return False
    mgr.health = max(0, mgr.health - 1)
    if mgr.health > 0:
        return False

    mgr.alive = False
    logger.debug("Manager defeated at tick %d", world.tick_count)
    world.emit(GameEvent.MANAGER_DEFEATED, mgr)
    world.scheduler.schedule(
        world.tick_count + MANAGER_DEFEAT_DELAY_TICKS,
        lambda: _manager_defeat_transition(world),
        label="manager-defeat",
    )
    return True


def _manager_defeat_transition(world: "World"):
    world.manager_defeated = True
    world.emit(GameEvent.ROUND_WON, world.manager)
    world.finish(won=True)


def resolve_manager_combat(world: "World"):
    """Player throws and player contact are the only things that hurt the manager"""
    mgr = world.manager
    if mgr is None or not mgr.alive:
        return
    if world.manager_melee_cooldown > 0:
        world.manager_melee_cooldown -= 1

    reach_x, reach_y = MANAGER_PROJECTILE_REACH
    for proj in world.projectiles:
        if not mgr.alive:
            break
        if proj.alive and proj.owner.kind is EntityKind.PLAYER:
            if abs(proj.x - mgr.x) < reach_x and abs(proj.y - mgr.y) < reach_y:
                proj.life = 0
                damage_manager(world)
    world.projectiles = [p for p in world.projectiles if p.alive]

    player = world.player
    if not mgr.alive or player is None or not player.alive:
        return
    melee_x, melee_y = MANAGER_MELEE_REACH
    if abs(player.x - mgr.x) < melee_x and abs(player.y - mgr.y) < melee_y \
            and world.manager_melee_cooldown == 0:
        damage_manager(world)
        world.manager_melee_cooldown = MANAGER_MELEE_COOLDOWN


# ----------------------------
# Haunted printer
# ----------------------------

def apply_hazard_damage(world: "World"):
    hazard = world.hazard
    if hazard is None:
        return
    for ent in world.live_combatants():
        if distance(hazard.x, hazard.y, ent.x, ent.y) < HAZARD_DAMAGE_RADIUS:
            ent.take_damage(HAZARD_DAMAGE)
            ent.wobble = WOBBLE_TICKS
