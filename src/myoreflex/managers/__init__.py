"""
Model-graph management for reflex circuits.
"""

from myoreflex.managers.model_registry import ComponentHandle, ModelRegistry

__all__ = [
    "ComponentHandle",
    "ModelRegistry",
]
