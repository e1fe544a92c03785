"""Tests for the frame-driven timer queue."""

from laserstrike.session.timers import TimerQueue


class TestTimerQueue:
    """Tests for TimerQueue."""

    def test_nothing_fires_early(self):
        q = TimerQueue()
        fired = []
        q.schedule(100, fired.append)
        assert q.run_due(99) == 0
        assert fired == []
        assert q.pending() == 1

    def test_fires_in_deadline_order(self):
        q = TimerQueue()
        fired = []
        q.schedule(300, lambda t: fired.append(("c", t)))
        q.schedule(100, lambda t: fired.append(("a", t)))
        q.schedule(200, lambda t: fired.append(("b", t)))
        assert q.run_due(1000) == 3
        assert fired == [("a", 100), ("b", 200), ("c", 300)]

    def test_equal_deadlines_keep_schedule_order(self):
        q = TimerQueue()
        fired = []
        q.schedule(50, lambda t: fired.append(1))
        q.schedule(50, lambda t: fired.append(2))
        q.run_due(50)
        assert fired == [1, 2]

    def test_one_shot(self):
        q = TimerQueue()
        fired = []
        q.schedule(10, fired.append)
        q.run_due(10)
        q.run_due(20)
        assert fired == [10]
        assert q.pending() == 0

    def test_cancel(self):
        q = TimerQueue()
        fired = []
        handle = q.schedule(10, fired.append)
        q.schedule(20, fired.append)
        handle.cancel()
        assert q.pending() == 1
        assert q.run_due(100) == 1
        assert fired == [20]

    def test_cancel_all(self):
        q = TimerQueue()
        fired = []
        handles = [q.schedule(t, fired.append) for t in (10, 20, 30)]
        q.cancel_all()
        assert q.run_due(100) == 0
        assert fired == []
        assert all(h.cancelled for h in handles)

    def test_reschedule_from_callback(self):
        """A repeating tick reschedules itself; catch-up happens within one run_due."""
        q = TimerQueue()
        ticks = []

        def tick(due):
            ticks.append(due)
            if len(ticks) < 3:
                q.schedule(due + 1000, tick)

        q.schedule(1000, tick)
        q.run_due(1500)
        assert ticks == [1000]
        q.run_due(5000)
        assert ticks == [1000, 2000, 3000]
        assert q.pending() == 0
