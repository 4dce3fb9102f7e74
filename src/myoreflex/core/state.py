"""
Simulation State - the context passed into every evaluation.

The solver owns the state; reflex components only read from it. Sensor
readings are kept in one flat ``sensordata`` tensor indexed by the sensor's
slot, the same way MuJoCo exposes ``data.sensordata``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Union

import numpy as np
import torch

ArrayLike = Union[torch.Tensor, np.ndarray, Sequence[float]]


@dataclass(frozen=True)
class SimulationState:
    """Immutable snapshot of the simulation at one (possibly trial) time.

    Attributes:
        time: Simulation time of this snapshot
        sensordata: Flat tensor of sensor readings, one slot per scalar
    """

    time: float
    sensordata: torch.Tensor = field(default_factory=lambda: torch.zeros(0, dtype=torch.float64))

    @classmethod
    def from_readings(cls, time: float, readings: ArrayLike) -> SimulationState:
        """Build a state from any array-like sensor vector."""
        if isinstance(readings, torch.Tensor):
            data = readings.detach().to(dtype=torch.float64).flatten()
        else:
            data = torch.as_tensor(np.asarray(readings, dtype=np.float64)).flatten()
        return cls(time=float(time), sensordata=data)

    def reading(self, slot: int) -> float:
        """Scalar sensor reading at ``slot``."""
        return float(self.sensordata[slot].item())
