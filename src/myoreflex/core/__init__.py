"""
Core types shared by every reflex component.
"""

from myoreflex.core.protocols import Actuator, LengthSensor, ModelHost, TensionSensor
from myoreflex.core.state import SimulationState

__all__ = [
    "Actuator",
    "LengthSensor",
    "ModelHost",
    "SimulationState",
    "TensionSensor",
]
