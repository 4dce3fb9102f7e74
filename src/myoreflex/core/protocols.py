"""
Protocols for the collaborators a reflex circuit reads from.

The circuit never depends on a concrete physics engine. Anything that
satisfies these protocols can host it: the in-memory ``ModelRegistry`` used in
tests, or an adapter around a real musculoskeletal simulator.

Consumed interfaces
===================
- ModelHost: named lookup and per-kind enumeration of model components
- Actuator: muscle reference lengths and accumulative control writes
- LengthSensor: spindle stretch length and speed
- TensionSensor: golgi tendon length
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

import torch

if TYPE_CHECKING:
    from myoreflex.core.state import SimulationState
    from myoreflex.managers.model_registry import ComponentHandle


@runtime_checkable
class Actuator(Protocol):
    """A muscle the reflex excites."""

    name: str
    optimal_fiber_length: float
    tendon_slack_length: float
    max_contraction_velocity: float

    def add_in_controls(self, controls: torch.Tensor, amount: float) -> None:
        """Add ``amount`` to this actuator's slot of ``controls``."""
        ...


@runtime_checkable
class LengthSensor(Protocol):
    """Spindle-like sensor reporting stretch length and speed."""

    name: str

    def get_muscle(self) -> Actuator: ...

    def get_spindle_length(self, state: SimulationState) -> float: ...

    def get_spindle_speed(self, state: SimulationState) -> float: ...


@runtime_checkable
class TensionSensor(Protocol):
    """Golgi-tendon-like sensor reporting tendon length."""

    name: str

    def get_muscle(self) -> Actuator: ...

    def get_tendon_length(self, state: SimulationState) -> float: ...


@runtime_checkable
class ModelHost(Protocol):
    """Finalized model graph the circuit resolves its sockets against."""

    def find_component(self, kind: str, name: str) -> Optional[ComponentHandle]:
        """Handle of the component called ``name``, or None."""
        ...

    def components_of_kind(self, kind: str) -> Sequence[ComponentHandle]:
        """Handles of every component of ``kind`` in enumeration order."""
        ...

    def get(self, handle: ComponentHandle) -> Any:
        """Component behind ``handle``."""
        ...
