"""
Configuration for reflex circuits.

    from myoreflex.config import ReflexCircuitConfig, GainSet, DelayConfig

    config = ReflexCircuitConfig(
        spindle_list=["ALL"],
        golgi_list=["ALL"],
        gains=GainSet(gain_length=2.0),
    )
"""

from myoreflex.config.base import BaseConfig
from myoreflex.config.circuit_config import (
    DelayConfig,
    GainSet,
    InterneuronConfig,
    ReflexCircuitConfig,
)

__all__ = [
    "BaseConfig",
    "DelayConfig",
    "GainSet",
    "InterneuronConfig",
    "ReflexCircuitConfig",
]
