"""Utility Functions.

Signal helpers and the delay line used by reflex circuits.
"""

from myoreflex.utils.delay_line import DelayLine
from myoreflex.utils.signal_utils import as_afferent_tensor, rectify

__all__ = [
    "DelayLine",
    "as_afferent_tensor",
    "rectify",
]
