"""
Tests for item spawning and combatant respawning.
"""
import logging

from game.arena.config import RESPAWN_DELAY_TICKS, SPAWN_MIN_DISTANCE
from game.arena.entities import AIState, Knockback
from game.arena.spawning import (
    cancel_respawn,
    pick_spawn_point,
    respawn,
    respawn_picked_items,
    schedule_respawn,
    spawn_item_at_spot,
    valid_spawn_points,
)
from game.arena.utils import distance
from game.arena.world import World

from conftest import add_bot, give_item


class TestItemSpawning:
    """Tests for spot items."""

    def test_spawn_item_at_spot(self, bare_world):
        """A new item rests at its spot's coordinates."""
        bare_world.item_spots = [(100.0, 120.0), (300.0, 320.0)]
        item = spawn_item_at_spot(bare_world, 1)
        assert (item.x, item.y) == (300.0, 320.0)
        assert item.spot_index == 1
        assert item.resting
        assert item in bare_world.items

    def test_picked_item_is_replaced(self, bare_world):
        """Picking up a spot's item refills the spot and detaches the held item."""
        bare_world.item_spots = [(100.0, 120.0)]
        item = spawn_item_at_spot(bare_world, 0)
        item.held_by = bare_world.player
        bare_world.player.inventory.append(item)

        fresh = respawn_picked_items(bare_world)

        assert len(fresh) == 1
        assert fresh[0].spot_index == 0 and fresh[0].resting
        assert item.spot_index is None
        assert respawn_picked_items(bare_world) == []

    def test_resting_items_not_replaced(self, world):
        """Spots with their item still resting are left alone."""
        before = len(world.items)
        assert respawn_picked_items(world) == []
        assert len(world.items) == before


class TestSpawnPoints:
    """Tests for spawn point selection."""

    def test_points_keep_distance(self, bare_world):
        """Valid points are at least the minimum distance from live combatants."""
        p = bare_world.player
        points = valid_spawn_points(bare_world)
        assert points
        assert all(distance(x, y, p.x, p.y) >= SPAWN_MIN_DISTANCE for x, y in points)
        assert len(points) < len(bare_world.spawn_points)

    def test_dead_combatants_ignored(self, bare_world):
        """Knocked-out combatants do not block spawn points."""
        bare_world.player.alive = False
        assert valid_spawn_points(bare_world) == bare_world.spawn_points

    def test_relaxes_when_crowded(self, bare_world, caplog):
        """With no point far enough away the distance constraint is relaxed."""
        bare_world.spawn_points = [(100.0, 100.0)]
        bare_world.player.x, bare_world.player.y = 110.0, 100.0

        with caplog.at_level(logging.WARNING, logger="game.arena.spawning"):
            point = pick_spawn_point(bare_world)

        assert point == (100.0, 100.0)
        assert "relaxed" in caplog.text

    def test_centre_fallback_for_tiny_arena(self, caplog):
        """An arena without any grid point spawns at its centre."""
        w = World(width=100, height=100, seed=1)
        with caplog.at_level(logging.WARNING, logger="game.arena.spawning"):
            point = pick_spawn_point(w)
        assert point == (50.0, 50.0)
        assert "centre" in caplog.text


class TestRespawn:
    """Tests for combatant respawning."""

    def test_respawn_resets_bot(self, bare_world):
        """Respawn restores health and clears inventory, knockback and target."""
        bot = add_bot(bare_world, 200, 200)
        held = give_item(bare_world, bot)
        bot.health = 0
        bot.alive = False
        bot.knockback = Knockback(3.0, 0.0, 4)
        bot.target = bare_world.player
        bot.ai_state = AIState.CHASE_PLAYER

        respawn(bare_world, bot)

        assert bot.alive and bot.health == bot.max_health
        assert bot.inventory == []
        assert held not in bare_world.items
        assert not bot.knockback.active
        assert bot.target is None
        assert bot.ai_state is AIState.WANDER
        assert (bot.x, bot.y) in bare_world.spawn_points

    def test_scheduled_respawn_fires_on_due_tick(self, bare_world):
        """A scheduled respawn runs exactly when its tick is drained."""
        p = bare_world.player
        p.health = 0
        p.alive = False
        bare_world.tick_count = 5
        schedule_respawn(bare_world, p)

        bare_world.scheduler.drain(5 + RESPAWN_DELAY_TICKS - 1)
        assert not p.alive
        bare_world.scheduler.drain(5 + RESPAWN_DELAY_TICKS)
        assert p.alive
        assert p not in bare_world.respawn_handles

    def test_cancel_respawn(self, bare_world):
        """A cancelled respawn never runs."""
        p = bare_world.player
        p.alive = False
        schedule_respawn(bare_world, p)

        assert cancel_respawn(bare_world, p)
        assert not cancel_respawn(bare_world, p)
        bare_world.scheduler.drain(10 ** 6)
        assert not p.alive
