"""
Tests for timed world events and the manager's spawn countdown.
"""
import math

from game.arena.config import (
    EVACUATION_TICKS,
    EVENT_INTERVAL_TICKS,
    EVENT_MESSAGE_TICKS,
    HAZARD_RADIUS,
    HAZARD_SPEED,
    MANAGER_EDGE_INSET,
    SLOW_FIELD_FACTOR,
    SLOW_FIELD_TICKS,
)
from game.arena.entities import HauntedPrinter, Manager
from game.arena.events import (
    EVENT_MESSAGES,
    WorldEvent,
    spawn_manager,
    trigger_event,
    update_events,
    update_manager_spawn,
)
from game.arena.notifications import GameEvent


class TestTriggerEvent:
    """Tests for starting world events."""

    def test_slow_field(self, bare_world):
        """The coffee flood slows everyone for its duration."""
        trigger_event(bare_world, WorldEvent.SLOW_FIELD)
        ev = bare_world.events
        assert ev.slow_field_ticks == SLOW_FIELD_TICKS
        assert ev.speed_factor == SLOW_FIELD_FACTOR
        assert ev.message == EVENT_MESSAGES[WorldEvent.SLOW_FIELD]
        assert ev.active() == [WorldEvent.SLOW_FIELD]
        assert bare_world.tick_events[-1].kind is GameEvent.WORLD_EVENT_STARTED

    def test_evacuation(self, bare_world):
        """The fire drill runs for its fixed duration."""
        trigger_event(bare_world, WorldEvent.EVACUATION)
        assert bare_world.events.evacuation_ticks == EVACUATION_TICKS
        assert bare_world.events.evacuation_active
        assert bare_world.events.speed_factor == 1.0

    def test_haunted_printer(self, bare_world):
        """The printer starts at the centre moving at fixed speed."""
        trigger_event(bare_world, WorldEvent.HAUNTED_PRINTER)
        hazard = bare_world.hazard
        assert (hazard.x, hazard.y) == (480.0, 300.0)
        assert math.isclose(math.hypot(hazard.vx, hazard.vy), HAZARD_SPEED)

    def test_random_event(self, bare_world):
        """Without a kind one of the three events is picked."""
        kind = trigger_event(bare_world)
        assert kind in list(WorldEvent)
        assert bare_world.events.current is kind

    def test_message_cleared_later(self, bare_world):
        """The event message disappears after its display time."""
        trigger_event(bare_world, WorldEvent.SLOW_FIELD)
        bare_world.scheduler.drain(EVENT_MESSAGE_TICKS - 1)
        assert bare_world.events.message is not None
        bare_world.scheduler.drain(EVENT_MESSAGE_TICKS)
        assert bare_world.events.message is None

    def test_old_timer_keeps_newer_message(self, bare_world):
        """An earlier event's expiry does not clear a later event's message."""
        trigger_event(bare_world, WorldEvent.SLOW_FIELD)
        bare_world.tick_count = 100
        trigger_event(bare_world, WorldEvent.EVACUATION)

        bare_world.scheduler.drain(EVENT_MESSAGE_TICKS)
        assert bare_world.events.message == EVENT_MESSAGES[WorldEvent.EVACUATION]

        bare_world.scheduler.drain(100 + EVENT_MESSAGE_TICKS)
        assert bare_world.events.message is None


class TestUpdateEvents:
    """Tests for per-tick event timers."""

    def test_durations_count_down(self, bare_world):
        """Active events run out."""
        bare_world.events.slow_field_ticks = 2
        update_events(bare_world)
        update_events(bare_world)
        assert not bare_world.events.slow_field_active
        update_events(bare_world)
        assert bare_world.events.slow_field_ticks == 0

    def test_interval_triggers_event(self, bare_world):
        """When the countdown runs out a new event starts and the countdown restarts."""
        bare_world.events.countdown = 1
        update_events(bare_world)
        assert bare_world.events.current is not None
        assert bare_world.events.countdown == EVENT_INTERVAL_TICKS

    def test_printer_bounces_off_walls(self, bare_world):
        """The printer reverses at the arena edge and stays inside it."""
        w = bare_world.width
        hazard = HauntedPrinter(x=w - HAZARD_RADIUS - 1, y=300.0, vx=4.0, vy=0.0, ticks=50)
        bare_world.events.hazard = hazard

        update_events(bare_world)

        assert hazard.vx == -4.0
        assert hazard.x == w - HAZARD_RADIUS
        assert hazard.ticks == 49

    def test_printer_expires(self, bare_world):
        """The printer vanishes when its time is up."""
        bare_world.events.hazard = HauntedPrinter(x=300.0, y=300.0, vx=1.0, vy=0.0, ticks=1)
        update_events(bare_world)
        assert bare_world.hazard is None


class TestManagerSpawn:
    """Tests for the manager's appearance."""

    def test_spawns_on_edge(self, bare_world):
        """The manager appears on one of the four arena edges."""
        for seed in range(20):
            bare_world.rng.seed(seed)
            mgr = spawn_manager(bare_world)
            on_edge = (
                mgr.x in (MANAGER_EDGE_INSET, bare_world.width - MANAGER_EDGE_INSET)
                or mgr.y in (MANAGER_EDGE_INSET, bare_world.height - MANAGER_EDGE_INSET)
            )
            assert on_edge
        assert bare_world.tick_events[-1].kind is GameEvent.MANAGER_SPAWNED

    def test_countdown(self, bare_world):
        """The manager spawns when the countdown reaches zero."""
        bare_world.manager_spawn_timer = 2
        assert update_manager_spawn(bare_world) is None
        mgr = update_manager_spawn(bare_world)
        assert mgr is bare_world.manager

    def test_only_once_per_round(self, bare_world):
        """No second manager while one exists or after a defeat."""
        bare_world.manager = Manager(x=100.0, y=100.0)
        bare_world.manager_spawn_timer = 1
        assert update_manager_spawn(bare_world) is None

        bare_world.manager = None
        bare_world.manager_defeated = True
        assert update_manager_spawn(bare_world) is None
