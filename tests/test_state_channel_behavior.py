import threading
import unittest

from simpleremote import view_state as vs
from simpleremote.models import RokuDevice
from simpleremote.state import StateChannel


class StateChannelBehaviorTests(unittest.TestCase):
    def test_observer_without_prior_post_gets_nothing(self):
        """Validate scenario: an empty channel does not call new observers."""
        ch = StateChannel()
        seen = []
        ch.observe(seen.append)
        self.assertEqual(seen, [])
        self.assertIsNone(ch.value)

    def test_observers_receive_posts_in_order(self):
        """Validate scenario: posts are delivered to every observer."""
        ch = StateChannel()
        a, b = [], []
        ch.observe(a.append)
        ch.observe(b.append)
        ch.post(1)
        ch.post(2)
        self.assertEqual(a, [1, 2])
        self.assertEqual(b, [1, 2])
        self.assertEqual(ch.value, 2)

    def test_unsubscribe_stops_delivery(self):
        """Validate scenario: returned callable removes the observer."""
        ch = StateChannel()
        seen = []
        stop = ch.observe(seen.append)
        ch.post("x")
        stop()
        stop()
        ch.post("y")
        self.assertEqual(seen, ["x"])

    def test_failing_observer_does_not_block_others(self):
        """Validate scenario: observer errors are logged and isolated."""
        ch = StateChannel()
        seen = []

        def _bad(_value):
            raise RuntimeError("observer failure")

        ch.observe(_bad)
        ch.observe(seen.append)
        with self.assertLogs("simpleremote.state", level="ERROR"):
            ch.post("ok")
        self.assertEqual(seen, ["ok"])

    def test_posts_from_threads_leave_a_valid_last_value(self):
        """Validate scenario: concurrent posts end with one of the posted values."""
        ch = StateChannel()
        threads = [threading.Thread(target=ch.post, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertIn(ch.value, range(20))

    def test_concurrent_post_waits_for_running_delivery(self):
        """Validate scenario: a slow observer still ends on the channel's latest value."""
        ch = StateChannel()
        seen = []
        entered = threading.Event()
        release = threading.Event()

        def _slow(value):
            if value == 1:
                entered.set()
                release.wait(5.0)
            seen.append(value)

        ch.observe(_slow)
        first = threading.Thread(target=ch.post, args=(1,))
        first.start()
        self.assertTrue(entered.wait(5.0))
        second = threading.Thread(target=ch.post, args=(2,))
        second.start()
        second.join(0.05)
        release.set()
        first.join(5.0)
        second.join(5.0)

        self.assertEqual(seen, [1, 2])
        self.assertEqual(seen[-1], ch.value)

    def test_initial_delivery_is_not_overtaken_by_post(self):
        """Validate scenario: a post racing a new observer's initial delivery arrives after it."""
        ch = StateChannel()
        ch.post(1)
        seen = []
        entered = threading.Event()
        release = threading.Event()

        def _slow(value):
            if value == 1:
                entered.set()
                release.wait(5.0)
            seen.append(value)

        joiner = threading.Thread(target=ch.observe, args=(_slow,))
        joiner.start()
        self.assertTrue(entered.wait(5.0))
        poster = threading.Thread(target=ch.post, args=(2,))
        poster.start()
        poster.join(0.05)
        release.set()
        joiner.join(5.0)
        poster.join(5.0)

        self.assertEqual(seen, [1, 2])
        self.assertEqual(ch.value, 2)


class ViewStateBehaviorTests(unittest.TestCase):
    def test_device_selected_carries_device(self):
        """Validate scenario: only the selected state has a device payload."""
        device = RokuDevice("http://192.0.2.10", "Living Room", "ABC123")
        state = vs.device_selected(device)
        self.assertEqual(state.kind, vs.KIND_DEVICE_SELECTED)
        self.assertIs(state.device, device)
        self.assertIn("Living Room", str(state))
        self.assertEqual(str(vs.DEVICE_DISCONNECTED), "device_disconnected")

    def test_invalid_states_are_rejected(self):
        """Validate scenario: unknown kinds or misplaced devices raise ValueError."""
        device = RokuDevice("http://192.0.2.10", "Living Room", "ABC123")
        with self.assertRaises(ValueError):
            vs.ViewState("bogus")
        with self.assertRaises(ValueError):
            vs.ViewState(vs.KIND_DEVICE_SELECTED)
        with self.assertRaises(ValueError):
            vs.ViewState(vs.KIND_DEVICE_RECONNECTED, device)


if __name__ == "__main__":
    unittest.main()
