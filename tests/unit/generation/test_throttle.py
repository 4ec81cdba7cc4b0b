"""Unit tests for Throttle."""

from unittest.mock import MagicMock

import pytest

from boardkit.generation import Throttle


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.mark.unit
class TestThrottle:
    """Tests for Throttle.wait."""

    def test_first_wait_does_not_sleep(self) -> None:
        sleep = MagicMock()
        Throttle(0.1, sleep=sleep, clock=FakeClock()).wait()
        sleep.assert_not_called()

    def test_back_to_back_waits_sleep_full_interval(self) -> None:
        clock = FakeClock()
        sleep = MagicMock(side_effect=clock.sleep)
        throttle = Throttle(0.1, sleep=sleep, clock=clock)

        throttle.wait()
        throttle.wait()

        sleep.assert_called_once()
        assert sleep.call_args.args[0] == pytest.approx(0.1)

    def test_sleeps_only_the_remainder(self) -> None:
        clock = FakeClock()
        sleep = MagicMock(side_effect=clock.sleep)
        throttle = Throttle(0.1, sleep=sleep, clock=clock)

        throttle.wait()
        clock.now += 0.04
        throttle.wait()

        assert sleep.call_args.args[0] == pytest.approx(0.06)

    def test_no_sleep_when_interval_already_passed(self) -> None:
        clock = FakeClock()
        sleep = MagicMock(side_effect=clock.sleep)
        throttle = Throttle(0.1, sleep=sleep, clock=clock)

        throttle.wait()
        clock.now += 2.0
        throttle.wait()

        sleep.assert_not_called()

    def test_calls_are_spaced_by_interval(self) -> None:
        clock = FakeClock()
        throttle = Throttle(0.1, sleep=clock.sleep, clock=clock)
        stamps = []
        for _ in range(5):
            throttle.wait()
            stamps.append(clock.now)

        gaps = [b - a for a, b in zip(stamps, stamps[1:], strict=False)]
        assert all(gap >= 0.1 - 1e-9 for gap in gaps)

    def test_disabled_never_sleeps(self) -> None:
        throttle = Throttle.disabled()
        throttle._sleep = MagicMock()
        for _ in range(3):
            throttle.wait()
        throttle._sleep.assert_not_called()

    def test_negative_interval_rejected(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            Throttle(-0.5)
