"""
Pytest fixtures for arena simulation tests.
"""

import random

import pytest

from game.arena.entities import Bot, Item, ItemType, Player, Projectile
from game.arena.layout import generate_spawn_points
from game.arena.orchestrator import new_world
from game.arena.world import World


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value; integer draws stay seeded"""

    def __init__(self, value: float, seed: int = 0):
        super().__init__(seed)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def world():
    """A fully reset round with the default layout."""
    return new_world(seed=1234)


@pytest.fixture
def bare_world():
    """Open floor: no obstacles, items or bots; the player stands in the middle."""
    w = World(seed=7)
    w.spawn_points = generate_spawn_points(w.width, w.height, [])
    w.player = Player(x=480.0, y=300.0)
    w.alive_snapshot = {w.player: True}
    w.manager_spawn_timer = 10 ** 6
    return w


def add_bot(world, x, y, **kwargs):
    """Place a bot by hand and register it as alive."""
    kwargs.setdefault("speed", 2.5)
    kwargs.setdefault("name", f"Bot{len(world.bots) + 1}")
    bot = Bot(x=float(x), y=float(y), **kwargs)
    world.bots.append(bot)
    world.alive_snapshot[bot] = bot.alive
    return bot


def add_item(world, x, y, item_type=ItemType.CLIP, spot_index=None):
    item = Item(item_type=item_type, x=float(x), y=float(y), spot_index=spot_index)
    world.items.append(item)
    return item


def give_item(world, entity, item_type=ItemType.CLIP):
    """Put an item straight into an entity's inventory."""
    item = add_item(world, entity.x, entity.y, item_type)
    item.held_by = entity
    entity.inventory.append(item)
    return item


def make_projectile(owner, x, y, damage=35, vx=0.0, vy=0.0, life=90, radius=12.0):
    """A stapler-sized projectile at rest unless given a velocity."""
    return Projectile(
        item_type=ItemType.STAPLER, x=x, y=y, vx=vx, vy=vy,
        damage=damage, radius=radius, owner=owner, life=life,
    )
