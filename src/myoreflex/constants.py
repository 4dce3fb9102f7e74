"""
Project-wide constants for reflex circuits.

All default values should be defined here and imported elsewhere.
"""

from __future__ import annotations

import sys
from typing import Final

# =============================================================================
# Numerics
# =============================================================================

EPSILON: Final[float] = sys.float_info.epsilon
"""Machine epsilon. Delays below it are rejected, thresholds below it always fire."""

TIME_TOLERANCE: Final[float] = 1e-12
"""Slack used when comparing simulation times (absorbs 0.15 - 0.1 != 0.05)."""

# =============================================================================
# Wiring
# =============================================================================

ALL_SENTINEL: Final[str] = "ALL"
"""Declared-name token meaning "every sensor of this kind in the model"."""

KIND_MUSCLE: Final[str] = "muscle"
KIND_SPINDLE: Final[str] = "spindle"
KIND_GOLGI: Final[str] = "golgi"

# Afferents fed to the interneuron in the delayed pipeline:
# stretch length, stretch speed, tendon length
N_CIRCUIT_AFFERENTS: Final[int] = 3

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_GAIN: Final[float] = 1.0
DEFAULT_THRESHOLD: Final[float] = 0.0
DEFAULT_SIGNAL: Final[float] = 0.0
DEFAULT_DELAY_CAPACITY: Final[int] = 64
