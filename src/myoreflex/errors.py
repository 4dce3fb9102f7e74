"""
Custom exception classes and validation utilities for myoreflex.

This module provides:
1. Hierarchical exception classes for different error categories
2. Warning categories for recoverable wiring problems
3. Validation utilities that reject degenerate configuration early

Exception Hierarchy:
====================
ReflexError (base)
├── ConfigurationError - Invalid configuration, raised while a circuit finalizes
└── ComponentError - Lifecycle misuse of an assembled component

Warning Hierarchy:
==================
UserWarning
├── SensorResolutionWarning - A declared sensor name matched no instance
└── ReflexWiringWarning - A spindle/golgi pair was dropped

Usage Examples:
===============
    # Fatal, surfaces to whoever assembles the model
    raise ConfigurationError("delay_time must be >= 2.2e-16, got 0.0")

    # Lifecycle misuse
    raise ComponentError("knee_reflex", "cannot rewire sensors while running")

    # Recoverable, simulation proceeds
    warnings.warn("spindle 'x' was not found", SensorResolutionWarning)
"""

from __future__ import annotations

import math


# =============================================================================
# Exception Hierarchy
# =============================================================================


class ReflexError(Exception):
    """Base exception for all myoreflex-specific errors.

    All custom exceptions inherit from this class, enabling code to catch
    reflex-circuit errors specifically:

        try:
            circuit.connect_to_model(model)
        except ReflexError as e:
            logger.error(f"Reflex circuit rejected: {e}")
    """


class ConfigurationError(ReflexError):
    """Invalid configuration parameters.

    Raised once, while a circuit is assembled or connected: empty component
    names, unconnected sockets, non-positive delays, interneuron weight
    counts that do not match the afferents, and muscles whose reference
    lengths would make the reflex gains divide by zero.

    Example:
        raise ConfigurationError("gain_length must be finite, got nan")
    """


class ComponentError(ReflexError):
    """Error raised by an assembled component.

    Args:
        component_name: Name of the component (e.g., "soleus_reflex")
        message: Description of the error

    Example:
        raise ComponentError("soleus_reflex", "model reference is gone")
    """

    def __init__(self, component_name: str, message: str):
        super().__init__(f"[{component_name}] {message}")
        self.component_name = component_name


# =============================================================================
# Warning Categories
# =============================================================================


class SensorResolutionWarning(UserWarning):
    """A declared sensor name was not found in the model and was ignored."""


class ReflexWiringWarning(UserWarning):
    """A spindle/golgi pair could not be formed and was left out."""


# =============================================================================
# Validation Utilities
# =============================================================================


def validate_positive(
    value: float,
    name: str,
    minimum: float = 0.0,
) -> None:
    """Validate that a value is finite and strictly above ``minimum``.

    Args:
        value: Value to check
        name: Parameter name for error messages
        minimum: Exclusive lower bound (default: 0.0)

    Raises:
        ConfigurationError: If value is not finite or not above the bound

    Example:
        >>> validate_positive(muscle.optimal_fiber_length, "optimal_fiber_length")
    """
    validate_finite(value, name)
    if value <= minimum:
        if minimum == 0.0:
            raise ConfigurationError(f"{name} must be positive, got {value}")
        raise ConfigurationError(f"{name} must be > {minimum}, got {value}")


def validate_finite(value: float, name: str) -> None:
    """Validate that a scalar is a finite real number.

    Raises:
        ConfigurationError: If value is NaN, infinite or not numeric
    """
    try:
        finite = math.isfinite(value)
    except TypeError:
        raise ConfigurationError(f"{name} must be numeric, got {type(value).__name__}") from None
    if not finite:
        raise ConfigurationError(f"{name} must be finite, got {value}")


def validate_component_name(name: str, kind: str) -> None:
    """Validate that a component has a non-empty name.

    Args:
        name: Component name
        kind: Component kind for the error message (e.g., "ReflexCircuit")

    Raises:
        ConfigurationError: If the name is empty or blank
    """
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"{kind} has no name; every component must be named")
