import threading
import unittest

from app.justifiedgrid.layout.models import GridImage
from app.justifiedgrid.layout.relayout import Debouncer, RelayoutController
from app.justifiedgrid.settings import GridSettings


class FakeTimer:
    """threading.Timer stand-in that only fires when the test says so."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer


IMAGES = [
    GridImage("a", "a.jpg", 400, 300),
    GridImage("b", "b.jpg", 300, 300),
    GridImage("c", "c.jpg", 500, 250),
]


class TestDebouncer(unittest.TestCase):
    def setUp(self) -> None:
        self.calls = []
        self.factory = FakeTimerFactory()
        self.debouncer = Debouncer(self.calls.append, 0.3, timer_factory=self.factory)

    def test_burst_collapses_to_last_call(self):
        for width in (10, 20, 30):
            self.debouncer.trigger(width)
        self.assertEqual(len(self.factory.timers), 3)
        self.assertEqual([t.cancelled for t in self.factory.timers], [True, True, False])
        self.assertTrue(self.debouncer.pending)

        self.factory.timers[-1].fire()
        self.assertEqual(self.calls, [30])
        self.assertFalse(self.debouncer.pending)

    def test_superseded_timer_does_not_run(self):
        self.debouncer.trigger(10)
        self.debouncer.trigger(20)
        # Simulate the first timer firing anyway (cancel raced with expiry).
        self.factory.timers[0].fire()
        self.assertEqual(self.calls, [])

    def test_cancel(self):
        self.debouncer.trigger(10)
        self.debouncer.cancel()
        self.assertTrue(self.factory.timers[0].cancelled)
        self.assertFalse(self.debouncer.pending)
        self.factory.timers[0].fire()
        self.assertEqual(self.calls, [])

    def test_timer_setup(self):
        self.debouncer.trigger(10)
        timer = self.factory.timers[0]
        self.assertEqual(timer.interval, 0.3)
        self.assertTrue(timer.daemon)
        self.assertTrue(timer.started)

    def test_negative_delay(self):
        with self.assertRaises(ValueError):
            Debouncer(self.calls.append, -1)

    def test_real_timer_fires(self):
        done = threading.Event()
        seen = []

        def callback(width):
            seen.append(width)
            done.set()

        debouncer = Debouncer(callback, 0.01)
        debouncer.trigger(42)
        self.assertTrue(done.wait(2.0))
        self.assertEqual(seen, [42])


class TestRelayoutController(unittest.TestCase):
    def setUp(self) -> None:
        self.published = []
        self.factory = FakeTimerFactory()
        self.controller = RelayoutController(
            IMAGES,
            GridSettings(),
            on_layout=self.published.append,
            timer_factory=self.factory,
        )

    def tearDown(self) -> None:
        self.controller.close()

    def test_relayout_now_publishes(self):
        rows = self.controller.relayout_now(860)
        self.assertEqual([r.ids for r in rows], [["a", "b"], ["c"]])
        self.assertEqual(self.controller.rows, rows)
        self.assertEqual(self.controller.container_width, 860)
        self.assertEqual(len(self.published), 1)
        self.assertEqual(self.published[0], list(rows))

    def test_nothing_to_do_before_first_width(self):
        self.assertEqual(self.controller.relayout_now(), ())
        self.assertEqual(self.published, [])

    def test_resizes_are_debounced(self):
        for width in (600, 700, 2000):
            self.controller.container_resized(width)
        self.assertEqual(self.published, [])
        self.assertTrue(self.controller.pending)

        self.factory.timers[-1].fire()
        self.assertEqual(self.controller.container_width, 2000)
        self.assertEqual(len(self.published), 1)
        self.assertEqual([r.ids for r in self.controller.rows], [["a", "b", "c"]])

    def test_debounce_delay_comes_from_settings(self):
        self.controller.container_resized(500)
        self.assertAlmostEqual(self.factory.timers[0].interval, 0.3)

    def test_set_images_relayouts_at_last_width(self):
        self.controller.relayout_now(860)
        self.controller.set_images(IMAGES[:1])
        self.assertEqual([r.ids for r in self.controller.rows], [["a"]])
        self.assertEqual(len(self.published), 2)

    def test_update_settings(self):
        self.controller.relayout_now(860)
        self.controller.update_settings(GridSettings(gutter=20, debounce_ms=50))
        self.assertEqual(self.controller.rows[0].target_width, 840)
        self.controller.container_resized(900)
        self.assertAlmostEqual(self.factory.timers[-1].interval, 0.05)

    def test_unmeasured_container(self):
        with self.assertLogs("app.justifiedgrid.layout.justified", level="WARNING"):
            rows = self.controller.relayout_now(0)
        self.assertEqual(rows, ())
        self.assertEqual(self.published, [[]])

    def test_close_cancels_pending(self):
        self.controller.container_resized(500)
        self.controller.close()
        self.assertFalse(self.controller.pending)
        self.factory.timers[0].fire()
        self.assertEqual(self.published, [])


if __name__ == "__main__":
    unittest.main()
