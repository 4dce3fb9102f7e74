"""
Delay Line - fixed-latency signal history for continuous-time solvers.

This module provides a time-indexed history buffer for modeling the
conduction latency of a reflex arc while an external solver advances the
simulation in many small, adaptive steps.

Unlike a ring buffer indexed by step count, samples are keyed by simulation
time, because the solver:
- Picks its own (variable) step sizes, so "N steps ago" has no fixed meaning
- Evaluates trial states, including re-evaluations at the same time
- Rolls back to earlier times after rejecting a step

History rules:
- A sample newer than the latest one is appended
- A sample at an already recorded time overwrites it (idempotent re-evaluation)
- A sample behind the latest one (after a rollback) is inserted in time order;
  a rejected trial sample ahead of it is overwritten once the solver gets
  back to that time

A read at ``t`` returns the latest recorded value at or before
``t - delay_time``, or ``default_signal`` while the history is younger than
the delay.

Memory: O(n_samples), doubled on demand; call ``prune_before`` once steps are
accepted to bound it.
Record: amortized O(1) when appending, O(n_samples) when inserting behind
the latest sample. Read: O(log n_samples).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import torch
import torch.nn as nn

from myoreflex.config.circuit_config import DelayConfig
from myoreflex.constants import DEFAULT_DELAY_CAPACITY, TIME_TOLERANCE

logger = logging.getLogger(__name__)


class DelayLine(nn.Module):
    """Time-keyed history returning a signal ``delay_time`` in the past.

    Args:
        config: Delay time and default signal
        initial_capacity: Initial number of sample slots (grows by doubling)
        name: Component name used in log messages
    """

    def __init__(
        self,
        config: DelayConfig,
        initial_capacity: int = DEFAULT_DELAY_CAPACITY,
        name: str = "delay",
    ):
        config.validate()
        if initial_capacity <= 0:
            raise ValueError(f"initial_capacity must be > 0, got {initial_capacity}")

        super().__init__()

        self.config = config
        self.name = name
        self.delay_time = float(config.delay_time)
        self.default_signal = float(config.default_signal)
        self.dtype = config.get_torch_dtype()

        # Parallel buffers: times[:count] is strictly increasing
        device = config.get_torch_device()
        self.register_buffer("times", torch.zeros(initial_capacity, dtype=self.dtype, device=device))
        self.register_buffer("values", torch.zeros(initial_capacity, dtype=self.dtype, device=device))

        self.count = 0
        self.n_rollbacks = 0
        self._last_output: Optional[float] = None

    @property
    def device(self) -> torch.device:  # type: ignore[override]
        """Device where the history tensors reside."""
        return self.times.device

    @property
    def capacity(self) -> int:
        return int(self.times.shape[0])

    @property
    def latest_time(self) -> Optional[float]:
        """Time of the newest recorded sample, or None when empty."""
        if self.count == 0:
            return None
        return float(self.times[self.count - 1].item())

    def __len__(self) -> int:
        return self.count

    def record(self, time: float, value: float) -> bool:
        """Record the upstream signal at simulation time ``time``.

        A sample within ``TIME_TOLERANCE`` of a recorded time overwrites that
        sample. Any other sample is inserted at its sorted position, so steps
        accepted after a rollback fill in behind a rejected trial sample.

        Args:
            time: Simulation time of the sample
            value: Signal value at that time

        Returns:
            True if a new sample was stored, False if an existing one was
            overwritten
        """
        latest = self.latest_time
        if latest is None or time > latest + TIME_TOLERANCE:
            self._insert(self.count, time, value)
            return True

        if time < latest - TIME_TOLERANCE:
            self.n_rollbacks += 1
            logger.debug(
                "%s: sample at t=%.9g is behind history (t=%.9g)",
                self.name, time, latest,
            )

        idx = self._index_at_or_before(time)
        if idx >= 0 and float(self.times[idx].item()) >= time - TIME_TOLERANCE:
            self.values[idx] = value
            return False

        self._insert(idx + 1, time, value)
        return True

    def read(self, query_time: float) -> float:
        """Latest recorded value at or before ``query_time - delay_time``.

        The bound is inclusive up to ``TIME_TOLERANCE``: a sample at ``t0``
        already answers ``read(t0 + delay_time - TIME_TOLERANCE)``, so binary
        rounding of ``t0 + delay_time`` never hides it.

        Returns:
            Delayed signal, or ``default_signal`` if no sample is old enough
        """
        if self.count == 0:
            return self.default_signal

        idx = self._index_at_or_before(query_time - self.delay_time)
        if idx < 0:
            return self.default_signal
        return float(self.values[idx].item())

    def evaluate(self, query_time: float, value: float) -> float:
        """Record the current sample, then answer the delayed value.

        This is the per-call entry point used by the circuit: the caller
        supplies the instantaneous upstream value for the current time.
        """
        self.record(query_time, value)
        output = self.read(query_time)
        self._last_output = output
        return output

    def prune_before(self, earliest_query_time: float) -> int:
        """Drop samples no read at or after ``earliest_query_time`` can return.

        The newest sample at or before ``earliest_query_time - delay_time``
        is kept since it still answers such reads.

        Returns:
            Number of samples discarded
        """
        if self.count == 0:
            return 0

        idx = self._index_at_or_before(earliest_query_time - self.delay_time)
        if idx <= 0:
            return 0

        remaining = self.count - idx
        self.times[:remaining] = self.times[idx:self.count].clone()
        self.values[:remaining] = self.values[idx:self.count].clone()
        self.count = remaining
        logger.debug("%s: pruned %d samples", self.name, idx)
        return idx

    def reset_state(self) -> None:
        """Forget all history (start of a new simulation run)."""
        self.count = 0
        self.n_rollbacks = 0
        self._last_output = None

    def get_diagnostics(self) -> Dict[str, Any]:
        return {
            "delay_time": self.delay_time,
            "default_signal": self.default_signal,
            "n_samples": self.count,
            "capacity": self.capacity,
            "latest_time": self.latest_time,
            "n_rollbacks": self.n_rollbacks,
            "last_output": self._last_output,
        }

    def _index_at_or_before(self, target_time: float) -> int:
        """Index of the newest sample with time <= target (-1 if none)."""
        target = torch.tensor([target_time + TIME_TOLERANCE], dtype=self.dtype, device=self.device)
        insert_at = torch.searchsorted(self.times[:self.count], target, right=True)
        return int(insert_at.item()) - 1

    def _insert(self, idx: int, time: float, value: float) -> None:
        if self.count == self.capacity:
            self._grow(2 * self.capacity)
        if idx < self.count:
            self.times[idx + 1:self.count + 1] = self.times[idx:self.count].clone()
            self.values[idx + 1:self.count + 1] = self.values[idx:self.count].clone()
        self.times[idx] = time
        self.values[idx] = value
        self.count += 1

    def _grow(self, new_capacity: int) -> None:
        new_times = torch.zeros(new_capacity, dtype=self.dtype, device=self.device)
        new_values = torch.zeros(new_capacity, dtype=self.dtype, device=self.device)
        new_times[:self.count] = self.times[:self.count]
        new_values[:self.count] = self.values[:self.count]
        self.register_buffer("times", new_times)
        self.register_buffer("values", new_values)

    def extra_repr(self) -> str:
        return f"name={self.name!r}, delay_time={self.delay_time}, n_samples={self.count}"
