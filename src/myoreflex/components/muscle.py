"""
Muscle - the actuator a reflex circuit excites.

Only the parts of a muscle model the reflex path needs are represented: the
reference lengths that normalize the reflex terms, and the control slot the
excitation is written into. Muscle dynamics belong to the host simulator.
"""

from __future__ import annotations

import torch

from myoreflex.errors import ConfigurationError, validate_component_name, validate_positive


class Muscle:
    """Reference lengths and control slot of one muscle actuator.

    Args:
        name: Unique muscle name in the model
        control_index: Slot of this muscle in the shared controls vector
        optimal_fiber_length: Fiber length at peak isometric force
        tendon_slack_length: Tendon length at which it starts to bear load
        max_contraction_velocity: Maximum shortening speed in optimal
            fiber lengths per unit time
    """

    def __init__(
        self,
        name: str,
        control_index: int,
        optimal_fiber_length: float = 0.1,
        tendon_slack_length: float = 0.2,
        max_contraction_velocity: float = 10.0,
    ):
        validate_component_name(name, "Muscle")
        if control_index < 0:
            raise ConfigurationError(f"Muscle '{name}' control_index must be >= 0, got {control_index}")

        self.name = name
        self.control_index = control_index
        self.optimal_fiber_length = optimal_fiber_length
        self.tendon_slack_length = tendon_slack_length
        self.max_contraction_velocity = max_contraction_velocity

    def validate(self) -> None:
        """Reject reference lengths the reflex terms would divide by.

        Raises:
            ConfigurationError: If any reference quantity is not positive
        """
        validate_positive(self.optimal_fiber_length, f"{self.name}.optimal_fiber_length")
        validate_positive(self.tendon_slack_length, f"{self.name}.tendon_slack_length")
        validate_positive(self.max_contraction_velocity, f"{self.name}.max_contraction_velocity")

    def add_in_controls(self, controls: torch.Tensor, amount: float) -> None:
        """Accumulate ``amount`` into this muscle's control slot."""
        if self.control_index >= controls.shape[0]:
            raise ConfigurationError(
                f"Muscle '{self.name}' control_index {self.control_index} is outside "
                f"a controls vector of size {controls.shape[0]}"
            )
        controls[self.control_index] += amount

    def __repr__(self) -> str:
        return f"Muscle(name={self.name!r}, control_index={self.control_index})"
