"""
Reflex components: the muscle actuator, proprioceptive sensors and the
interneuron.
"""

from myoreflex.components.interneuron import Interneuron
from myoreflex.components.muscle import Muscle
from myoreflex.components.sensors import GolgiTendon, Proprioceptor, SimpleSpindle

__all__ = [
    "GolgiTendon",
    "Interneuron",
    "Muscle",
    "Proprioceptor",
    "SimpleSpindle",
]
