"""
Bot decision making (targeting, steering, throwing) and manager steering
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Tuple

from .config import (
    AI_MAX_TARGETERS,
    AI_PLAYER_TARGET_CHANCE,
    AI_RETARGET_TICKS,
    AI_THROW_CHANCE,
    AI_THROW_RANGE,
    AI_WANDER_CHANCE,
    CHASE_SPEED_FACTOR,
    EVACUATION_CORNER_INSET,
    EVACUATION_SPEED_FACTOR,
    MANAGER_AVOID_ACCEL,
    MANAGER_AVOID_RADIUS,
    MANAGER_BOUNDS_INSET,
    MANAGER_FLEE_ACCEL,
    MANAGER_FLEE_RADIUS,
    MANAGER_FRICTION,
    MANAGER_MAX_SPEED,
    SEPARATION_PUSH,
    SEPARATION_RADIUS,
    WANDER_KICK,
    WANDER_KICK_CHANCE,
    WANDER_SPEED_FACTOR,
)
from .entities import AIState, Bot, Combatant, Knockback
from .combat import throw_item, try_pickup
from .utils import clamp, distance, move_with_clamp, normalize, vec_len

if TYPE_CHECKING:
    from .world import World


# ----------------------------
# Targeting
# ----------------------------

def target_counts(world: "World", exclude: Bot = None) -> Dict[Combatant, int]:
    """How many live bots (other than `exclude`) currently target each combatant"""
    counts: Dict[Combatant, int] = {}
    for b in world.bots:
        if b is exclude or not b.alive or b.target is None:
            continue
        counts[b.target] = counts.get(b.target, 0) + 1
    return counts


def needs_new_target(bot: Bot) -> bool:
    return bot.target is None or not bot.target.alive or bot.ai_timer <= 0


def choose_target(bot: Bot, world: "World"):
    """
    Pick who this bot goes after next.

    The player is chosen with low probability and only while fewer than
    AI_MAX_TARGETERS bots already chase them. Otherwise the bot takes a
    live coworker that is not already swarmed, any live coworker if all
    are, and the player when nobody else is left. Independently, the bot
    may decide to just wander for a while.
    """
    rng = world.rng
    player = world.player
    counts = target_counts(world, exclude=bot)
    others = world.live_bots(exclude=bot)

    player_free = player is not None and player.alive and counts.get(player, 0) < AI_MAX_TARGETERS
    if rng.random() < AI_PLAYER_TARGET_CHANCE and player_free:
        bot.target = player
        bot.ai_state = AIState.CHASE_PLAYER
    else:
        choices = [b for b in others if counts.get(b, 0) < AI_MAX_TARGETERS] or others
        if choices:
            bot.target = rng.choice(choices)
            bot.ai_state = AIState.CHASE_BOT
        else:
            bot.target = player
            bot.ai_state = AIState.CHASE_PLAYER

    bot.ai_timer = rng.randint(*AI_RETARGET_TICKS)
    if rng.random() < AI_WANDER_CHANCE:
        bot.ai_state = AIState.WANDER


# ----------------------------
# Steering
# ----------------------------

def evacuation_heading(bot: Bot, world: "World") -> Tuple[float, float]:
    """Unit vector toward the nearest arena corner"""
    inset = EVACUATION_CORNER_INSET
    tx = inset if bot.x < world.width / 2 else world.width - inset
    ty = inset if bot.y < world.height / 2 else world.height - inset
    return normalize(tx - bot.x, ty - bot.y)


def separation(bot: Bot, world: "World") -> Tuple[float, float]:
    """Push away from coworkers inside SEPARATION_RADIUS, harder the closer they are"""
    px = py = 0.0
    for other in world.live_bots(exclude=bot):
        d = distance(bot.x, bot.y, other.x, other.y)
        if d < SEPARATION_RADIUS:
            nx, ny = normalize(bot.x - other.x, bot.y - other.y)
            weight = SEPARATION_PUSH * (2.0 - d / SEPARATION_RADIUS)
            px += nx * weight
            py += ny * weight
    return px, py


def steering(bot: Bot, world: "World") -> Tuple[float, float]:
    """Movement intent for this tick (before knockback)"""
    if world.events.evacuation_active:
        nx, ny = evacuation_heading(bot, world)
        return nx * bot.speed * EVACUATION_SPEED_FACTOR, ny * bot.speed * EVACUATION_SPEED_FACTOR

    slow = world.events.speed_factor
    dx = dy = 0.0
    if bot.ai_state in (AIState.CHASE_PLAYER, AIState.CHASE_BOT) and bot.target is not None:
        nx, ny = normalize(bot.target.x - bot.x, bot.target.y - bot.y)
        dx = nx * bot.speed * CHASE_SPEED_FACTOR * slow
        dy = ny * bot.speed * CHASE_SPEED_FACTOR * slow
    elif bot.ai_state is AIState.WANDER:
        dx = math.cos(bot.wander_dir) * bot.speed * WANDER_SPEED_FACTOR * slow
        dy = math.sin(bot.wander_dir) * bot.speed * WANDER_SPEED_FACTOR * slow
        if world.rng.random() < WANDER_KICK_CHANCE:
            bot.wander_dir += (world.rng.random() - 0.5) * WANDER_KICK

    sx, sy = separation(bot, world)
    return dx + sx, dy + sy


def move_combatant(entity: Combatant, world: "World", dx: float, dy: float):
    """Clamped, obstacle-sliding move; velocity records the displacement actually made"""
    old_x, old_y = entity.x, entity.y
    move_with_clamp(entity, dx, dy, world.width, world.height, world.obstacles)
    entity.vx = entity.x - old_x
    entity.vy = entity.y - old_y


def apply_knockback_step(entity: Combatant, world: "World"):
    kb = entity.knockback
    move_combatant(entity, world, kb.x, kb.y)
    kb.ticks -= 1
    if kb.ticks <= 0:
        entity.knockback = Knockback()


def update_bot(bot: Bot, world: "World"):
    """One tick of a single bot: pickup, targeting, throwing, movement"""
    if not bot.alive:
        return

    try_pickup(bot, world)

    if needs_new_target(bot):
        choose_target(bot, world)
    else:
        bot.ai_timer -= 1

    target = bot.target
    if bot.inventory and target is not None:
        if distance(bot.x, bot.y, target.x, target.y) < AI_THROW_RANGE and world.rng.random() < AI_THROW_CHANCE:
            throw_item(bot, world)

    if bot.knockback.active:
        apply_knockback_step(bot, world)
        return

    dx, dy = steering(bot, world)
    move_combatant(bot, world, dx, dy)


def update_bots(world: "World"):
    for bot in world.bots:
        update_bot(bot, world)


# ----------------------------
# Manager
# ----------------------------

def update_manager(world: "World"):
    """The manager flees the player and drifts away from furniture"""
    mgr = world.manager
    if mgr is None or not mgr.alive:
        return

    player = world.player
    px = player.x if player is not None else world.width / 2
    py = player.y if player is not None else world.height / 2
    dx, dy = mgr.x - px, mgr.y - py
    if vec_len(dx, dy) < MANAGER_FLEE_RADIUS:
        nx, ny = normalize(dx, dy)
        mgr.vx += nx * MANAGER_FLEE_ACCEL
        mgr.vy += ny * MANAGER_FLEE_ACCEL

    for o in world.obstacles:
        ox = mgr.x - o.x - o.w / 2
        oy = mgr.y - o.y - o.h / 2
        if vec_len(ox, oy) < MANAGER_AVOID_RADIUS:
            nx, ny = normalize(ox, oy)
            mgr.vx += nx * MANAGER_AVOID_ACCEL
            mgr.vy += ny * MANAGER_AVOID_ACCEL

    if vec_len(mgr.vx, mgr.vy) > MANAGER_MAX_SPEED:
        mgr.vx *= 0.85
        mgr.vy *= 0.85
    mgr.x += mgr.vx
    mgr.y += mgr.vy
    mgr.vx *= MANAGER_FRICTION
    mgr.vy *= MANAGER_FRICTION

    inset = MANAGER_BOUNDS_INSET
    mgr.x = clamp(mgr.x, inset, world.width - inset)
    mgr.y = clamp(mgr.y, inset, world.height - inset)
    mgr.escape_timer += 1
