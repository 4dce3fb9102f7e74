"""
MYOREFLEX - delayed proprioceptive reflex circuits for muscle simulations.

Turns muscle spindle and golgi tendon readings into motor excitation, either
directly through per-afferent gains or through a threshold interneuron and a
fixed-latency delay line, while an external continuous-time solver steps the
simulation.

Quick Start:
============

    from myoreflex import (
        ModelRegistry, Muscle, SimpleSpindle, GolgiTendon,
        ReflexCircuit, ReflexCircuitConfig, GainSet, SimulationState,
    )

    model = ModelRegistry()
    soleus = Muscle("soleus", control_index=0, optimal_fiber_length=0.05)
    model.add_muscle(soleus)
    model.add_spindle(SimpleSpindle("soleus_spindle", soleus, length_slot=0, speed_slot=1))
    model.add_golgi(GolgiTendon("soleus_golgi", soleus, tendon_slot=2))
    model.finalize()

    circuit = ReflexCircuit(
        "soleus_reflex", "soleus",
        ReflexCircuitConfig(spindle_list=["ALL"], golgi_list=["ALL"], gains=GainSet(2.0, 0.0, 0.0)),
    )
    circuit.connect_to_model(model)

    controls = torch.zeros(1, dtype=torch.float64)
    circuit.compute_controls(SimulationState.from_readings(0.0, [0.02, 0.01, 0.0]), controls)

Internal code should use explicit imports:

    from myoreflex.utils.delay_line import DelayLine
    from myoreflex.circuits.reflex_circuit import ReflexCircuit
"""

__version__ = "0.1.0"

from myoreflex.circuits import CircuitMode, ReflexCircuit, SensorPair, resolve_sensors
from myoreflex.components import GolgiTendon, Interneuron, Muscle, SimpleSpindle
from myoreflex.config import (
    DelayConfig,
    GainSet,
    InterneuronConfig,
    ReflexCircuitConfig,
)
from myoreflex.core import SimulationState
from myoreflex.errors import (
    ComponentError,
    ConfigurationError,
    ReflexError,
    ReflexWiringWarning,
    SensorResolutionWarning,
)
from myoreflex.managers import ComponentHandle, ModelRegistry
from myoreflex.utils import DelayLine, rectify

__all__ = [
    "__version__",
    # Circuits
    "CircuitMode",
    "ReflexCircuit",
    "SensorPair",
    "resolve_sensors",
    # Components
    "GolgiTendon",
    "Interneuron",
    "Muscle",
    "SimpleSpindle",
    "DelayLine",
    "rectify",
    # Configuration
    "DelayConfig",
    "GainSet",
    "InterneuronConfig",
    "ReflexCircuitConfig",
    # Host
    "ComponentHandle",
    "ModelRegistry",
    "SimulationState",
    # Errors
    "ComponentError",
    "ConfigurationError",
    "ReflexError",
    "ReflexWiringWarning",
    "SensorResolutionWarning",
]
