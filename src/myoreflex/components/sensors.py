"""
Proprioceptive sensors - muscle spindles and golgi tendon organs.

Sensors are stateless readers: each call pulls the instantaneous value for
the given simulation state out of ``state.sensordata`` at the slot the sensor
was registered with. There is no history here; latency is added downstream by
the delay line.

- SimpleSpindle: stretch length and stretch speed of its muscle
- GolgiTendon: tendon length of its muscle
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

from myoreflex.components.muscle import Muscle
from myoreflex.core.state import SimulationState
from myoreflex.errors import ConfigurationError, validate_component_name


class Proprioceptor(ABC):
    """Abstract base class for sensors attached to a single muscle."""

    kind: str = ""

    def __init__(self, name: str, muscle: Muscle):
        validate_component_name(name, type(self).__name__)
        if muscle is None:
            raise ConfigurationError(f"{type(self).__name__} '{name}' has no muscle connected")
        self.name = name
        self._muscle = muscle

    def get_muscle(self) -> Muscle:
        """Muscle this sensor is attached to."""
        return self._muscle

    @abstractmethod
    def compute_afferents(self, state: SimulationState) -> Dict[str, float]:
        """Named afferent readings for ``state``."""

    @staticmethod
    def _check_slot(name: str, label: str, slot: int) -> int:
        if slot < 0:
            raise ConfigurationError(f"{name}: {label} must be >= 0, got {slot}")
        return slot

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, muscle={self._muscle.name!r})"


class SimpleSpindle(Proprioceptor):
    """Muscle spindle reporting stretch length and stretch speed.

    Args:
        name: Unique spindle name in the model
        muscle: Muscle the spindle lies in
        length_slot: Index of the stretch length in ``sensordata``
        speed_slot: Index of the stretch speed in ``sensordata``
    """

    kind = "spindle"

    def __init__(self, name: str, muscle: Muscle, length_slot: int, speed_slot: int):
        super().__init__(name, muscle)
        self.length_slot = self._check_slot(name, "length_slot", length_slot)
        self.speed_slot = self._check_slot(name, "speed_slot", speed_slot)

    def get_spindle_length(self, state: SimulationState) -> float:
        return state.reading(self.length_slot)

    def get_spindle_speed(self, state: SimulationState) -> float:
        return state.reading(self.speed_slot)

    def compute_afferents(self, state: SimulationState) -> Dict[str, float]:
        return {
            "length": self.get_spindle_length(state),
            "speed": self.get_spindle_speed(state),
        }


class GolgiTendon(Proprioceptor):
    """Golgi tendon organ reporting tendon length.

    Args:
        name: Unique golgi tendon name in the model
        muscle: Muscle whose tendon carries the organ
        tendon_slot: Index of the tendon length in ``sensordata``
    """

    kind = "golgi"

    def __init__(self, name: str, muscle: Muscle, tendon_slot: int):
        super().__init__(name, muscle)
        self.tendon_slot = self._check_slot(name, "tendon_slot", tendon_slot)

    def get_tendon_length(self, state: SimulationState) -> float:
        return state.reading(self.tendon_slot)

    def compute_afferents(self, state: SimulationState) -> Dict[str, float]:
        return {"tendon_length": self.get_tendon_length(state)}
