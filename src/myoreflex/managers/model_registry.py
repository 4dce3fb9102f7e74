"""
Model Registry - typed arena of the components a reflex circuit binds to.

The registry plays the part of the host's finalized model graph. Components
live in one ordered arena per kind, and callers refer to them through
``ComponentHandle`` values (kind + index). Circuits resolve names to handles
once, at connect time, so the evaluation path never does string lookups.

Architecture:
=============
    ModelRegistry
        ├── muscle  → [Muscle, Muscle, ...]
        ├── spindle → [SimpleSpindle, ...]
        └── golgi   → [GolgiTendon, ...]

Usage Example:
==============
    model = ModelRegistry()
    soleus = Muscle("soleus", control_index=0)
    model.add_muscle(soleus)
    model.add_spindle(SimpleSpindle("soleus_spindle", soleus, length_slot=0, speed_slot=1))
    model.finalize()

    handle = model.find_component("spindle", "soleus_spindle")
    spindle = model.get(handle)

The registry owns its components; circuits only keep handles and a weak
reference to the registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from myoreflex.components.muscle import Muscle
from myoreflex.components.sensors import GolgiTendon, SimpleSpindle
from myoreflex.constants import KIND_GOLGI, KIND_MUSCLE, KIND_SPINDLE
from myoreflex.errors import ConfigurationError


@dataclass(frozen=True)
class ComponentHandle:
    """Borrowed reference to a registry entry."""

    kind: str
    index: int


class ModelRegistry:
    """Typed, ordered registry of muscles and proprioceptive sensors.

    Attributes:
        _arenas: kind -> ordered list of components
        _names: kind -> name -> index into the arena
    """

    _kind_types: Dict[str, Tuple[Type[Any], ...]] = {
        KIND_MUSCLE: (Muscle,),
        KIND_SPINDLE: (SimpleSpindle,),
        KIND_GOLGI: (GolgiTendon,),
    }

    def __init__(self) -> None:
        self._arenas: Dict[str, List[Any]] = {kind: [] for kind in self._kind_types}
        self._names: Dict[str, Dict[str, int]] = {kind: {} for kind in self._kind_types}
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> ModelRegistry:
        """Freeze the registry; no components can be added afterwards."""
        self._finalized = True
        return self

    def add(self, kind: str, component: Any) -> ComponentHandle:
        """Register ``component`` under ``kind``.

        Raises:
            ConfigurationError: If the kind is unknown, the component has the
                wrong type, its name is taken, its muscle is not registered,
                or the registry is finalized
        """
        if self._finalized:
            raise ConfigurationError(
                f"Cannot add {kind} '{getattr(component, 'name', component)}': model is finalized"
            )
        if kind not in self._kind_types:
            raise ConfigurationError(
                f"Invalid component kind '{kind}'. "
                f"Must be one of: {list(self._kind_types.keys())}"
            )
        if not isinstance(component, self._kind_types[kind]):
            expected = ", ".join(t.__name__ for t in self._kind_types[kind])
            raise ConfigurationError(
                f"{kind} components must be {expected}, got {type(component).__name__}"
            )

        name = component.name
        if self.is_registered(kind, name):
            raise ConfigurationError(f"{kind.capitalize()} name '{name}' already registered")

        if kind != KIND_MUSCLE:
            muscle = component.get_muscle()
            muscle_handle = self.find_component(KIND_MUSCLE, muscle.name)
            if muscle_handle is None or self.get(muscle_handle) is not muscle:
                raise ConfigurationError(
                    f"{kind.capitalize()} '{name}' is attached to muscle '{muscle.name}', "
                    f"which is not registered in this model"
                )

        arena = self._arenas[kind]
        arena.append(component)
        self._names[kind][name] = len(arena) - 1
        return ComponentHandle(kind, len(arena) - 1)

    def add_muscle(self, muscle: Muscle) -> ComponentHandle:
        return self.add(KIND_MUSCLE, muscle)

    def add_spindle(self, spindle: SimpleSpindle) -> ComponentHandle:
        return self.add(KIND_SPINDLE, spindle)

    def add_golgi(self, golgi: GolgiTendon) -> ComponentHandle:
        return self.add(KIND_GOLGI, golgi)

    def find_component(self, kind: str, name: str) -> Optional[ComponentHandle]:
        """Handle of the ``kind`` component called ``name`` (exact match), or None."""
        index = self._names.get(kind, {}).get(name)
        if index is None:
            return None
        return ComponentHandle(kind, index)

    def components_of_kind(self, kind: str) -> List[ComponentHandle]:
        """Handles of every ``kind`` component, in registration order."""
        return [ComponentHandle(kind, i) for i in range(len(self._arenas.get(kind, ())))]

    def get(self, handle: ComponentHandle) -> Any:
        """Component behind ``handle``.

        Raises:
            KeyError: If the handle does not belong to this registry
        """
        arena = self._arenas.get(handle.kind)
        if arena is None or not 0 <= handle.index < len(arena):
            raise KeyError(f"No {handle.kind} at index {handle.index}")
        return arena[handle.index]

    def is_registered(self, kind: str, name: str) -> bool:
        """True if a ``kind`` component called ``name`` was added."""
        return name in self._names.get(kind, {})

    def list_components(self, kind: str) -> List[str]:
        """Names of every ``kind`` component, in registration order."""
        return [component.name for component in self._arenas.get(kind, ())]

    def __len__(self) -> int:
        return sum(len(arena) for arena in self._arenas.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{kind}={len(arena)}" for kind, arena in self._arenas.items())
        return f"ModelRegistry({counts}, finalized={self._finalized})"
