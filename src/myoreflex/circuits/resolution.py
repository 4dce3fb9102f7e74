"""
Connect-time sensor resolution.

Turns a declared list of sensor names (or the ``ALL`` token) into handles
against the finalized model. Missing names are recoverable: each one emits a
``SensorResolutionWarning`` and is skipped, so one typo never aborts the
whole circuit.
"""

from __future__ import annotations

import logging
import warnings
from typing import List, Sequence

from myoreflex.constants import ALL_SENTINEL
from myoreflex.core.protocols import ModelHost
from myoreflex.errors import SensorResolutionWarning
from myoreflex.managers.model_registry import ComponentHandle

logger = logging.getLogger(__name__)


def is_all_sentinel(declared_names: Sequence[str]) -> bool:
    """True when the first declared entry is ``ALL`` (any case)."""
    return len(declared_names) > 0 and declared_names[0].upper() == ALL_SENTINEL


def resolve_sensors(
    model: ModelHost,
    kind: str,
    declared_names: Sequence[str],
    owner: str = "",
) -> List[ComponentHandle]:
    """Resolve declared sensor names to handles.

    Args:
        model: Finalized model to resolve against
        kind: Sensor kind ("spindle" or "golgi")
        declared_names: Sensor names, or ``["ALL"]``
        owner: Name of the resolving circuit, for warning messages

    Returns:
        Handles in declared order, or in model order for ``ALL``. Empty
        when nothing is declared.

    Warns:
        SensorResolutionWarning: Once per declared name with no match
    """
    if len(declared_names) == 0:
        return []

    if is_all_sentinel(declared_names):
        return list(model.components_of_kind(kind))

    prefix = f"{owner}: " if owner else ""
    handles: List[ComponentHandle] = []
    for name in declared_names:
        handle = model.find_component(kind, name)
        if handle is None:
            message = f"{prefix}{kind} '{name}' was not found and will be ignored."
            logger.warning(message)
            warnings.warn(message, SensorResolutionWarning, stacklevel=2)
            continue
        handles.append(handle)
    return handles
