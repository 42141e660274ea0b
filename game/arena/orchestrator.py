"""
Tick orchestrator: composes every arena component in a fixed per-tick order
-------------------------------------------------------------------------
(a) wobble timers
(b) manager combat against the player
(c) knockout edge detection (respawn scheduling, KO notifications)
(d) manager spawn countdown / manager movement / world-event timers
(e) player movement, pickup, throw on a fresh trigger
(f) bot AI and movement
(g) projectile flight and hits
(h) refill spots whose item was picked up
(i) haunted printer damage
(j) knockout finalization for this tick's hits

Deferred one-shots (respawns, message expiry, manager defeat) are drained
before (a), so they apply "at the start of the next tick".
"""

from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass
from typing import List, Optional

from .ai import apply_knockback_step, move_combatant, update_bots, update_manager
from .combat import advance_projectiles, apply_hazard_damage, resolve_manager_combat, throw_item, try_pickup
from .config import (
    AI_INITIAL_TICKS,
    BOT_LIGHTNESS,
    BOT_SATURATION,
    BOT_SPEED_RANGE,
    MANAGER_SPAWN_TICKS,
)
from .entities import Bot, EntityKind, Player
from .events import EventState, update_events, update_manager_spawn
from .layout import generate_layout
from .notifications import GameEvent, Notification
from .spawning import pick_spawn_point, respawn_picked_items, schedule_respawn, spawn_item_at_spot
from .utils import vec_len
from .world import RoundResult, World

logger = logging.getLogger(__name__)


@dataclass
class PlayerInput:
    """Normalized movement intent plus the current state of the throw trigger"""
    move_x: float = 0.0
    move_y: float = 0.0
    throw: bool = False

    def clamped(self) -> "PlayerInput":
        """Same input with the movement vector limited to unit length"""
        l = vec_len(self.move_x, self.move_y)
        if l <= 1.0:
            return self
        return PlayerInput(self.move_x / l, self.move_y / l, self.throw)


# ----------------------------
# Round boundary
# ----------------------------

def _bot_color(world: World) -> str:
    hue = world.rng.randint(0, 360) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, BOT_LIGHTNESS / 100.0, BOT_SATURATION / 100.0)
    return "#{:02x}{:02x}{:02x}".format(int(r * 255), int(g * 255), int(b * 255))


def reset_round(world: World) -> World:
    """
    Start a fresh round in place.

    Applies a pending resize, regenerates the layout, re-creates the player
    and bots at spaced spawn points, fills every item spot and clears all
    round state. Listeners stay subscribed.
    """
    world.apply_pending_size()
    layout = generate_layout(world.width, world.height)
    world.obstacles = layout.obstacles
    world.item_spots = layout.item_spots
    world.spawn_points = layout.spawn_points

    world.scheduler.clear()
    world.respawn_handles.clear()
    world.projectiles = []
    world.items = []
    world.manager = None
    world.manager_defeated = False
    world.manager_melee_cooldown = 0
    world.events = EventState()
    world.tick_count = 0
    world.kills = 0
    world.round_over = False
    world.result = None
    world.throw_latched = False
    world.tick_events = []

    # Entities are placed one by one so each spawn keeps clear of the previous ones
    world.player = None
    world.bots = []
    x, y = pick_spawn_point(world)
    world.player = Player(x=x, y=y)
    rng = world.rng
    for i in range(1, world.bot_count + 1):
        x, y = pick_spawn_point(world)
        world.bots.append(Bot(
            x=x,
            y=y,
            name=f"Bot{i}",
            speed=rng.uniform(*BOT_SPEED_RANGE),
            ai_timer=rng.randint(*AI_INITIAL_TICKS),
            color=_bot_color(world),
        ))

    for idx in range(len(world.item_spots)):
        spawn_item_at_spot(world, idx)

    world.manager_spawn_timer = rng.randint(*MANAGER_SPAWN_TICKS)
    world.alive_snapshot = {e: e.alive for e in world.combatants()}
    logger.debug(
        "Round reset: %dx%d arena, %d obstacles, %d item spots, %d bots",
        world.width, world.height, len(world.obstacles), len(world.item_spots), len(world.bots),
    )
    return world


def end_round(world: World) -> RoundResult:
    """Freeze the simulation and hand back the final score"""
    return world.finish()


def new_world(**kwargs) -> World:
    """Build a World from keyword arguments and start its first round"""
    return reset_round(World(**kwargs))


# ----------------------------
# Tick steps
# ----------------------------

def _tick_wobble(world: World):
    for ent in world.combatants():
        if ent.wobble > 0:
            ent.wobble -= 1


def detect_knockouts(world: World):
    """
    Flip combatants at zero health to knocked out and fire the one-time
    side effects on the alive -> knocked-out edge.
    """
    for ent in world.combatants():
        if ent.alive and ent.health <= 0:
            ent.alive = False
        was_alive = world.alive_snapshot.get(ent, False)
        if was_alive and not ent.alive:
            ent.vx = ent.vy = 0.0
            schedule_respawn(world, ent)
            kind = GameEvent.PLAYER_KO if ent.kind is EntityKind.PLAYER else GameEvent.BOT_KO
            world.emit(kind, ent)
            logger.debug("%s knocked out at tick %d", ent.name, world.tick_count)
        world.alive_snapshot[ent] = ent.alive


def update_player(world: World, player_input: PlayerInput):
    player = world.player
    pressed = player_input.throw and not world.throw_latched
    world.throw_latched = player_input.throw
    if player is None or not player.alive:
        return

    if player.knockback.active:
        apply_knockback_step(player, world)
    else:
        speed = player.speed * world.events.speed_factor
        move_combatant(player, world, player_input.move_x * speed, player_input.move_y * speed)

    try_pickup(player, world)
    if pressed:
        throw_item(player, world)


def tick(world: World, player_input: Optional[PlayerInput] = None) -> List[Notification]:
    """Advance the world by one tick. Returns the notifications it emitted."""
    if world.round_over:
        return []
    player_input = (player_input or PlayerInput()).clamped()

    world.tick_events = []
    world.tick_count += 1
    world.scheduler.drain(world.tick_count)
    if world.round_over:
        return world.tick_events

    _tick_wobble(world)                       # (a)
    resolve_manager_combat(world)             # (b)
    detect_knockouts(world)                   # (c)
    update_manager_spawn(world)               # (d)
    update_manager(world)
    update_events(world)
    update_player(world, player_input)        # (e)
    update_bots(world)                        # (f)
    advance_projectiles(world)                # (g)
    respawn_picked_items(world)               # (h)
    apply_hazard_damage(world)                # (i)
    detect_knockouts(world)                   # (j)
    return world.tick_events


def run_ticks(world: World, n: int, player_input: Optional[PlayerInput] = None) -> int:
    """Tick up to n times with a constant input; stops early when the round ends"""
    done = 0
    for _ in range(n):
        if world.round_over:
            break
        tick(world, player_input)
        done += 1
    return done
