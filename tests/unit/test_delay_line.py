"""
Test delay line implementation.

Verifies that DelayLine correctly handles:
- Default signal before the delay has elapsed
- Reads at and after t0 + delay
- Repeated evaluation at the same time
- Rollback to earlier times
- Growth and pruning of the history
"""

import pytest
import torch

from myoreflex.config import DelayConfig
from myoreflex.constants import EPSILON, TIME_TOLERANCE
from myoreflex.errors import ConfigurationError
from myoreflex.utils.delay_line import DelayLine


def make_delay(delay_time=0.1, default_signal=-1.0, **kwargs):
    return DelayLine(DelayConfig(delay_time=delay_time, default_signal=default_signal), **kwargs)


@pytest.mark.unit
class TestDelayConfiguration:

    @pytest.mark.parametrize("delay_time", [0.0, -0.1, EPSILON / 2])
    def test_non_positive_delay_rejected(self, delay_time):
        with pytest.raises(ConfigurationError, match="delay_time"):
            make_delay(delay_time=delay_time)

    def test_epsilon_delay_accepted(self):
        delay = make_delay(delay_time=EPSILON)
        assert delay.delay_time == EPSILON

    def test_nan_delay_rejected(self):
        with pytest.raises(ConfigurationError):
            make_delay(delay_time=float("nan"))

    def test_invalid_capacity_rejected(self):
        with pytest.raises(ValueError, match="initial_capacity"):
            make_delay(initial_capacity=0)


@pytest.mark.unit
class TestDelayedRead:

    def test_empty_history_returns_default(self):
        delay = make_delay()
        assert delay.read(5.0) == -1.0

    def test_default_before_delay_elapsed(self):
        delay = make_delay(delay_time=0.1)
        delay.record(0.0, 3.0)
        assert delay.read(0.05) == -1.0
        assert delay.read(0.1 - 1e-6) == -1.0

    def test_value_after_delay_elapsed(self):
        t0, v0 = 0.2, 3.0
        delay = make_delay(delay_time=0.1)
        delay.record(t0, v0)
        assert delay.read(t0 + 0.1 + EPSILON) == v0
        assert delay.read(t0 + 10.0) == v0

    def test_read_exactly_at_delay(self):
        delay = make_delay(delay_time=0.1)
        delay.record(0.05, 0.6)
        # 0.15 - 0.1 rounds below 0.05 in binary floating point
        assert delay.read(0.15) == 0.6

    def test_read_bound_is_inclusive_within_tolerance(self):
        delay = make_delay(delay_time=0.5)
        delay.record(1.0, 7.0)
        assert delay.read(1.5 - TIME_TOLERANCE / 2) == 7.0
        assert delay.read(1.5 - 1e-9) == -1.0

    def test_returns_latest_qualifying_sample(self):
        delay = make_delay(delay_time=0.1)
        for t, v in [(0.0, 1.0), (0.1, 2.0), (0.2, 3.0), (0.3, 4.0)]:
            delay.record(t, v)

        assert delay.read(0.15) == 1.0
        assert delay.read(0.25) == 2.0
        assert delay.read(0.35) == 3.0
        assert delay.read(1.0) == 4.0

    def test_evaluate_records_then_reads(self):
        delay = make_delay(delay_time=0.1)
        assert delay.evaluate(0.05, 0.6) == -1.0
        assert delay.evaluate(0.15, 0.7) == 0.6
        assert len(delay) == 2


@pytest.mark.unit
class TestReentrancy:

    def test_same_time_overwrites(self):
        """Solver retries at the same time must not duplicate samples."""
        delay = make_delay(delay_time=0.1)
        delay.record(0.0, 1.0)
        delay.record(0.0, 2.0)
        delay.record(0.0, 3.0)

        assert len(delay) == 1
        assert delay.read(0.2) == 3.0

    def test_rollback_sample_never_answers_past_later_sample(self):
        delay = make_delay(delay_time=0.1)
        assert delay.record(1.0, 5.0) is True
        assert delay.record(0.5, 9.0) is True

        for query_time in [1.1, 1.2, 1.5, 10.0]:
            assert delay.read(query_time) == 5.0
        assert delay.read(0.7) == 9.0
        assert delay.n_rollbacks == 1

    def test_steps_accepted_after_rollback_are_recorded(self):
        delay = make_delay(delay_time=0.1)
        delay.record(0.0, 1.0)
        delay.record(1.0, 5.0)  # trial step, rejected by the solver
        delay.record(0.4, 2.0)
        delay.record(0.8, 3.0)

        assert len(delay) == 4
        assert delay.read(0.45) == 1.0
        assert delay.read(0.5) == 2.0
        assert delay.read(0.9) == 3.0
        assert delay.n_rollbacks == 2

    def test_rejected_trial_overwritten_on_return(self):
        delay = make_delay(delay_time=0.1)
        delay.record(0.0, 1.0)
        delay.record(0.2, 100.0)
        delay.record(0.1, 2.0)
        assert delay.record(0.2, 3.0) is False

        assert len(delay) == 3
        assert delay.read(0.3) == 3.0

    def test_rollback_keeps_time_ordering(self):
        delay = make_delay(delay_time=0.1)
        for t in [0.0, 0.1, 0.2]:
            delay.record(t, t)
        delay.record(0.15, 100.0)
        delay.record(0.3, 0.3)

        times = delay.times[: len(delay)]
        assert torch.all(times[1:] > times[:-1])
        assert times.tolist() == pytest.approx([0.0, 0.1, 0.15, 0.2, 0.3])
        assert len(delay) == 5

    def test_insert_behind_history_grows_capacity(self):
        delay = make_delay(delay_time=0.1, initial_capacity=2)
        delay.record(0.0, 0.0)
        delay.record(1.0, 1.0)
        delay.record(0.5, 0.5)

        assert delay.capacity >= 3
        assert delay.times[: len(delay)].tolist() == [0.0, 0.5, 1.0]
        assert delay.values[: len(delay)].tolist() == [0.0, 0.5, 1.0]

    def test_repeated_evaluation_is_idempotent(self):
        delay = make_delay(delay_time=0.1)
        delay.evaluate(0.0, 1.0)
        first = delay.evaluate(0.2, 2.0)
        second = delay.evaluate(0.2, 2.0)

        assert first == second == 1.0
        assert len(delay) == 2


@pytest.mark.unit
class TestHistoryStorage:

    def test_grows_past_initial_capacity(self):
        delay = make_delay(delay_time=0.5, initial_capacity=2)
        for k in range(10):
            delay.record(k * 0.1, float(k))

        assert len(delay) == 10
        assert delay.capacity >= 10
        assert delay.read(0.9) == 4.0

    def test_prune_keeps_answering_reads(self):
        delay = make_delay(delay_time=0.1)
        for k in range(10):
            delay.record(k * 0.1, float(k))

        discarded = delay.prune_before(0.55)
        assert discarded == 4
        assert len(delay) == 6
        assert delay.read(0.55) == 4.0
        assert delay.read(1.0) == 9.0

    def test_prune_on_young_history_is_noop(self):
        delay = make_delay(delay_time=1.0)
        delay.record(0.0, 1.0)
        delay.record(0.1, 2.0)
        assert delay.prune_before(0.5) == 0
        assert len(delay) == 2

    def test_reset_clears_history(self):
        delay = make_delay(delay_time=0.1)
        delay.record(0.0, 1.0)
        delay.record(-1.0, 1.0)
        delay.reset_state()

        assert len(delay) == 0
        assert delay.latest_time is None
        assert delay.n_rollbacks == 0
        assert delay.read(1.0) == -1.0

    def test_buffers_follow_state_dict(self):
        delay = make_delay(delay_time=0.1)
        state = delay.state_dict()
        assert set(state.keys()) == {"times", "values"}
        assert state["times"].dtype == torch.float64

    def test_diagnostics(self):
        delay = make_delay(delay_time=0.1)
        delay.evaluate(0.0, 1.0)
        diag = delay.get_diagnostics()
        assert diag["n_samples"] == 1
        assert diag["latest_time"] == 0.0
        assert diag["last_output"] == -1.0
