"""Shared test fixtures and configuration."""

from typing import Callable, Sequence

import pytest
import torch

from myoreflex import (
    GolgiTendon,
    ModelRegistry,
    Muscle,
    SimpleSpindle,
    SimulationState,
)


# Sensor data layout used by the shared model:
#   soleus:          length=0, speed=1, tendon=2
#   gastrocnemius:   length=3, speed=4, tendon=5
N_SENSOR_SLOTS = 6


@pytest.fixture
def soleus():
    """Muscle with the reference lengths used in the reflex examples."""
    return Muscle(
        "soleus",
        control_index=0,
        optimal_fiber_length=0.1,
        tendon_slack_length=0.2,
        max_contraction_velocity=10.0,
    )


@pytest.fixture
def gastrocnemius():
    return Muscle(
        "gastrocnemius",
        control_index=1,
        optimal_fiber_length=0.05,
        tendon_slack_length=0.4,
        max_contraction_velocity=5.0,
    )


@pytest.fixture
def single_muscle_model(soleus):
    """Finalized model with one spindle and one golgi on the soleus."""
    model = ModelRegistry()
    model.add_muscle(soleus)
    model.add_spindle(SimpleSpindle("soleus_spindle", soleus, length_slot=0, speed_slot=1))
    model.add_golgi(GolgiTendon("soleus_golgi", soleus, tendon_slot=2))
    return model.finalize()


@pytest.fixture
def two_muscle_model(soleus, gastrocnemius):
    """Finalized model with a spindle/golgi pair on each of two muscles."""
    model = ModelRegistry()
    model.add_muscle(soleus)
    model.add_muscle(gastrocnemius)
    model.add_spindle(SimpleSpindle("soleus_spindle", soleus, length_slot=0, speed_slot=1))
    model.add_spindle(SimpleSpindle("gastroc_spindle", gastrocnemius, length_slot=3, speed_slot=4))
    model.add_golgi(GolgiTendon("soleus_golgi", soleus, tendon_slot=2))
    model.add_golgi(GolgiTendon("gastroc_golgi", gastrocnemius, tendon_slot=5))
    return model.finalize()


@pytest.fixture
def make_state() -> Callable[..., SimulationState]:
    """Build a state from a time and leading sensor readings (rest zero-padded)."""

    def _make_state(time: float, readings: Sequence[float] = ()) -> SimulationState:
        data = torch.zeros(N_SENSOR_SLOTS, dtype=torch.float64)
        if len(readings) > 0:
            data[: len(readings)] = torch.tensor(list(readings), dtype=torch.float64)
        return SimulationState(time=time, sensordata=data)

    return _make_state


@pytest.fixture
def controls():
    """Zeroed controls vector for two muscles."""
    return torch.zeros(2, dtype=torch.float64)
