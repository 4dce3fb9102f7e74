"""
Reflex circuits and their connect-time sensor resolution.
"""

from myoreflex.circuits.reflex_circuit import CircuitMode, ReflexCircuit, SensorPair
from myoreflex.circuits.resolution import is_all_sentinel, resolve_sensors

__all__ = [
    "CircuitMode",
    "ReflexCircuit",
    "SensorPair",
    "is_all_sentinel",
    "resolve_sensors",
]
