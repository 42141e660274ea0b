"""
Tests for the world aggregate, its deferred queue and notifications.
"""
import pytest

from game.arena.notifications import GameEvent
from game.arena.world import Scheduler, World


class TestScheduler:
    """Tests for the tick-keyed deferred queue."""

    def test_runs_in_due_then_insertion_order(self):
        """Due actions run sorted by tick, ties in scheduling order."""
        s = Scheduler()
        ran = []
        s.schedule(5, lambda: ran.append("b"))
        s.schedule(3, lambda: ran.append("a"))
        s.schedule(5, lambda: ran.append("c"))
        s.schedule(9, lambda: ran.append("late"))

        assert s.drain(5) == 3
        assert ran == ["a", "b", "c"]
        assert len(s) == 1

    def test_nothing_due(self):
        """Draining before any due tick runs nothing."""
        s = Scheduler()
        s.schedule(10, lambda: None)
        assert s.drain(9) == 0
        assert len(s) == 1

    def test_cancel(self):
        """Cancelled entries are skipped; cancelling twice reports False."""
        s = Scheduler()
        ran = []
        handle = s.schedule(1, lambda: ran.append(1))
        assert s.cancel(handle)
        assert not s.cancel(handle)
        s.drain(1)
        assert ran == []

    def test_pending_labels(self):
        """Pending entries are listed by due tick."""
        s = Scheduler()
        s.schedule(7, lambda: None, label="respawn:You")
        s.schedule(2, lambda: None, label="message:coffee")
        assert s.pending() == [(2, "message:coffee"), (7, "respawn:You")]

    def test_action_can_schedule_more(self):
        """An action scheduling a later action does not run it early."""
        s = Scheduler()
        ran = []
        s.schedule(1, lambda: s.schedule(2, lambda: ran.append("second")))
        s.drain(1)
        assert ran == []
        s.drain(2)
        assert ran == ["second"]


class TestWorld:
    """Tests for World construction and round helpers."""

    def test_rejects_bad_size(self):
        """Non-positive arena sizes raise ValueError."""
        with pytest.raises(ValueError):
            World(width=0, height=600)
        with pytest.raises(ValueError):
            World(width=960, height=-1)

    def test_rejects_negative_bot_count(self):
        """A negative bot count raises ValueError."""
        with pytest.raises(ValueError):
            World(bot_count=-1)

    def test_resize_is_deferred(self):
        """resize() only records the size; apply_pending_size() applies it once."""
        w = World()
        w.resize(640, 480)
        assert (w.width, w.height) == (960, 600)
        assert w.apply_pending_size()
        assert (w.width, w.height) == (640, 480)
        assert not w.apply_pending_size()

    def test_resize_rejects_bad_size(self):
        """resize() validates like the constructor."""
        with pytest.raises(ValueError):
            World().resize(0, 10)

    def test_finish_freezes_once(self):
        """The first finish() wins; later calls return the same result."""
        w = World()
        w.kills = 3
        w.tick_count = 120
        first = w.finish(won=True)
        w.kills = 10
        second = w.finish(won=False)

        assert w.round_over
        assert second is first
        assert (first.score, first.elapsed_ticks, first.won) == (3, 120, True)

    def test_emit_and_subscribe(self):
        """Notifications go to tick_events and to every subscriber."""
        w = World()
        w.tick_count = 4
        seen = []
        w.subscribe(seen.append)

        note = w.emit(GameEvent.KILL_SCORED, "bot")
        assert w.tick_events == [note]
        assert seen == [note]
        assert note.tick == 4

        w.unsubscribe(seen.append)
        w.emit(GameEvent.BOT_KO)
        assert len(seen) == 1
        assert len(w.tick_events) == 2

    def test_seeded_rng(self):
        """Worlds built with the same seed draw the same numbers."""
        assert World(seed=5).rng.random() == World(seed=5).rng.random()
