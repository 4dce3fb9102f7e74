"""
Reflex Circuit Configuration.

Dataclasses describing how a reflex circuit is wired and tuned. They carry no
runtime state; a circuit reads them once when it is built and validates them
again when it connects to a model.

Two circuit variants share one config:
- Direct gain combination: ``interneuron`` and ``delay`` both None
- Interneuron + delay: both set

Setting only one of the two is rejected by ``ReflexCircuitConfig.validate``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from myoreflex.config.base import BaseConfig
from myoreflex.constants import (
    DEFAULT_GAIN,
    DEFAULT_SIGNAL,
    DEFAULT_THRESHOLD,
    EPSILON,
)
from myoreflex.errors import ConfigurationError, validate_finite


@dataclass
class GainSet:
    """Per-afferent reflex gains.

    Negative gains are allowed and model inhibition.
    """

    gain_length: float = DEFAULT_GAIN
    """Scale of the stretch (spindle length) reflex."""

    gain_velocity: float = DEFAULT_GAIN
    """Scale of the stretch-speed reflex."""

    gain_tendon: float = DEFAULT_GAIN
    """Scale of the tendon (golgi) reflex."""

    def validate(self) -> None:
        validate_finite(self.gain_length, "gain_length")
        validate_finite(self.gain_velocity, "gain_velocity")
        validate_finite(self.gain_tendon, "gain_tendon")


@dataclass
class InterneuronConfig(BaseConfig):
    """Configuration of the weighted threshold interneuron.

    The neuron sums its afferents with ``weights`` and fires the sum only when
    it is strictly greater than ``threshold``. Thresholds below machine
    epsilon mean the neuron always fires.
    """

    weights: Sequence[float] = field(default_factory=list)
    """One weight per connected afferent, in afferent order."""

    threshold: float = DEFAULT_THRESHOLD
    """Firing threshold on the weighted sum."""

    def validate(self) -> None:
        if len(self.weights) == 0:
            raise ConfigurationError("Interneuron needs at least one weight")
        for i, weight in enumerate(self.weights):
            validate_finite(weight, f"weights[{i}]")
        validate_finite(self.threshold, "threshold")


@dataclass
class DelayConfig(BaseConfig):
    """Configuration of a fixed-latency delay line."""

    delay_time: float = 0.0
    """Latency in simulation time units. Must be at least machine epsilon."""

    default_signal: float = DEFAULT_SIGNAL
    """Value returned until the history is older than ``delay_time``."""

    def validate(self) -> None:
        validate_finite(self.delay_time, "delay_time")
        if self.delay_time < EPSILON:
            raise ConfigurationError(
                f"delay_time must be >= {EPSILON}, got {self.delay_time}. "
                f"A zero delay would feed the signal back within the same step."
            )
        validate_finite(self.default_signal, "default_signal")


@dataclass
class ReflexCircuitConfig:
    """Complete wiring description of one reflex circuit.

    Sensor lists hold sensor names, or a single ``"ALL"`` entry to bind every
    sensor of that kind in the model. Empty lists disable that sensor kind.
    """

    spindle_list: List[str] = field(default_factory=list)
    """Names of the spindles attached to the controlled muscles."""

    golgi_list: List[str] = field(default_factory=list)
    """Names of the golgi tendon organs attached to the controlled muscles."""

    gains: GainSet = field(default_factory=GainSet)
    """Reflex gains used by the direct gain combination."""

    interneuron: Optional[InterneuronConfig] = None
    """Interneuron stage of the delayed pipeline."""

    delay: Optional[DelayConfig] = None
    """Delay stage of the delayed pipeline."""

    @property
    def uses_delayed_pipeline(self) -> bool:
        return self.interneuron is not None and self.delay is not None

    def validate(self) -> None:
        """Validate all sub-configs and the mode wiring.

        Raises:
            ConfigurationError: If any value is invalid or only one of
                interneuron/delay is configured
        """
        for label, names in (("spindle_list", self.spindle_list), ("golgi_list", self.golgi_list)):
            for name in names:
                if not isinstance(name, str) or not name:
                    raise ConfigurationError(f"{label} entries must be non-empty strings, got {name!r}")

        self.gains.validate()

        if (self.interneuron is None) != (self.delay is None):
            missing = "delay" if self.delay is None else "interneuron"
            raise ConfigurationError(
                f"Interneuron and delay must be configured together; {missing} is missing"
            )
        if self.interneuron is not None:
            self.interneuron.validate()
        if self.delay is not None:
            self.delay.validate()
