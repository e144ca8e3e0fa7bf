"""
Unit Tests for the Effect Coordinator

Tests the asynchronous generation state machine including:
- Starting from idle and coalescing while running
- Restarting with the latest pending parameters
- Source snapshot isolation
- Identity fallback when the effect raises
- Start and result handler failures
- Refused scheduling and shutdown with a pending restart
"""

from concurrent.futures import ThreadPoolExecutor
import threading
import unittest

import numpy as np

from MP_Libs.EditorsLib.effect_coordinator import EffectCoordinator, GenerationState
from MP_Libs.ImageEditingLib.pixelate_filter import pixelate

from conftest import make_gradient

WAIT = 5


class GatedEffect:
    """Pixelate effect that blocks on its first call until released."""

    def __init__(self):
        self.calls = []
        self.entered = threading.Event()
        self.gate = threading.Event()

    def __call__(self, image, param):
        self.calls.append(param)
        if len(self.calls) == 1:
            self.entered.set()
            self.gate.wait(WAIT)
        return pixelate(image, param)


class TestEffectCoordinator(unittest.TestCase):
    """Test submit / coalesce / restart behaviour."""

    def setUp(self):
        self.image = make_gradient(30, 20)
        self.results = []
        self.started = []
        self.effect = GatedEffect()
        self.coordinator = EffectCoordinator(
            self.effect,
            on_result=self.results.append,
            on_started=lambda request: self.started.append(request.param),
        )

    def tearDown(self):
        self.effect.gate.set()
        self.coordinator.shutdown()

    def test_idle_submit_starts(self):
        self.effect.gate.set()

        self.assertTrue(self.coordinator.submit(2, self.image))
        self.assertTrue(self.coordinator.wait_until_idle(WAIT))

        self.assertEqual(self.coordinator.state, GenerationState.IDLE)
        self.assertEqual(len(self.results), 1)
        np.testing.assert_array_equal(self.results[0].image, pixelate(self.image, 2))
        self.assertFalse(self.results[0].failed)

    def test_coalesces_to_latest_request(self):
        """Two submits during a run collapse into one restart with the last param."""
        self.assertTrue(self.coordinator.submit(1, self.image))
        self.assertTrue(self.effect.entered.wait(WAIT))
        self.assertTrue(self.coordinator.is_running)

        self.assertFalse(self.coordinator.submit(2, self.image))
        self.assertFalse(self.coordinator.submit(3, self.image))

        self.effect.gate.set()
        self.assertTrue(self.coordinator.wait_until_idle(WAIT))

        self.assertEqual(self.effect.calls, [1, 3])
        self.assertEqual(self.started, [1, 3])
        self.assertEqual(self.coordinator.generations_started, 2)
        self.assertEqual([r.request.param for r in self.results], [1, 3])
        np.testing.assert_array_equal(self.results[-1].image, pixelate(self.image, 3))

    def test_source_is_snapshotted(self):
        """Mutating the caller's buffer after submit does not affect the result."""
        source = self.image.copy()

        self.coordinator.submit(1, source)
        self.assertTrue(self.effect.entered.wait(WAIT))
        source[:, :] = 0
        self.effect.gate.set()
        self.assertTrue(self.coordinator.wait_until_idle(WAIT))

        np.testing.assert_array_equal(self.results[0].request.source, self.image)
        np.testing.assert_array_equal(self.results[0].image, pixelate(self.image, 1))

    def test_submit_after_idle_starts_again(self):
        self.effect.gate.set()

        self.coordinator.submit(2, self.image)
        self.assertTrue(self.coordinator.wait_until_idle(WAIT))
        self.assertTrue(self.coordinator.submit(4, self.image))
        self.assertTrue(self.coordinator.wait_until_idle(WAIT))

        self.assertEqual(self.effect.calls, [2, 4])
        self.assertEqual(self.coordinator.generations_started, 2)


class TestShutdown(unittest.TestCase):
    """Test shutting down with work outstanding."""

    def test_shutdown_drops_pending_restart(self):
        effect = GatedEffect()
        results = []
        coordinator = EffectCoordinator(effect, on_result=results.append)
        image = make_gradient(10, 10)

        coordinator.submit(1, image)
        self.assertTrue(effect.entered.wait(WAIT))
        self.assertFalse(coordinator.submit(2, image))

        coordinator.shutdown(wait=False)
        effect.gate.set()
        coordinator.shutdown(wait=True)

        self.assertEqual(effect.calls, [1])
        self.assertEqual(coordinator.state, GenerationState.IDLE)
        self.assertTrue(coordinator.wait_until_idle())

    def test_submit_after_shutdown(self):
        coordinator = EffectCoordinator(pixelate, on_result=print)
        coordinator.shutdown()

        with self.assertRaises(RuntimeError):
            coordinator.submit(2, make_gradient(4, 4))


class TestEffectFailures(unittest.TestCase):
    """Test error handling inside the worker."""

    def test_start_handler_error_on_first_start(self):
        def on_started(request):
            raise RuntimeError("host handler failed")

        results = []
        coordinator = EffectCoordinator(pixelate, on_result=results.append,
                                        on_started=on_started)
        image = make_gradient(10, 10)
        try:
            self.assertTrue(coordinator.submit(2, image))
            self.assertTrue(coordinator.wait_until_idle(WAIT))
            self.assertTrue(coordinator.submit(3, image))
            self.assertTrue(coordinator.wait_until_idle(WAIT))
        finally:
            coordinator.shutdown()

        self.assertEqual([r.request.param for r in results], [2, 3])

    def test_start_handler_error_on_restart(self):
        effect = GatedEffect()
        started = []

        def on_started(request):
            started.append(request.param)
            if len(started) == 2:
                raise RuntimeError("host handler failed")

        results = []
        coordinator = EffectCoordinator(effect, on_result=results.append,
                                        on_started=on_started)
        image = make_gradient(10, 10)
        try:
            coordinator.submit(1, image)
            self.assertTrue(effect.entered.wait(WAIT))
            coordinator.submit(2, image)
            effect.gate.set()
            self.assertTrue(coordinator.wait_until_idle(WAIT))

            self.assertTrue(coordinator.submit(3, image))
            self.assertTrue(coordinator.wait_until_idle(WAIT))
        finally:
            effect.gate.set()
            coordinator.shutdown()

        self.assertEqual(effect.calls, [1, 2, 3])
        self.assertEqual([r.request.param for r in results], [1, 2, 3])

    def test_refused_executor_returns_to_idle(self):
        executor = ThreadPoolExecutor(max_workers=1)
        executor.shutdown()
        coordinator = EffectCoordinator(pixelate, on_result=print, executor=executor)

        self.assertFalse(coordinator.submit(2, make_gradient(4, 4)))
        self.assertEqual(coordinator.state, GenerationState.IDLE)

    def test_effect_error_delivers_source(self):
        def broken(image, param):
            raise RuntimeError("boom")

        results = []
        coordinator = EffectCoordinator(broken, on_result=results.append)
        image = make_gradient(10, 10)
        try:
            coordinator.submit(5, image)
            self.assertTrue(coordinator.wait_until_idle(WAIT))
        finally:
            coordinator.shutdown()

        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].failed)
        np.testing.assert_array_equal(results[0].image, image)

    def test_result_handler_error_still_goes_idle(self):
        def handler(result):
            raise RuntimeError("handler failed")

        coordinator = EffectCoordinator(pixelate, on_result=handler)
        try:
            coordinator.submit(2, make_gradient(10, 10))
            self.assertTrue(coordinator.wait_until_idle(WAIT))
            self.assertFalse(coordinator.is_running)
        finally:
            coordinator.shutdown()

    def test_non_callable_effect(self):
        with self.assertRaises(ValueError):
            EffectCoordinator("pixelate", on_result=print)


if __name__ == "__main__":
    unittest.main()
