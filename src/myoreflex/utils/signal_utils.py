"""
Signal helpers shared by the reflex pipelines.
"""

from __future__ import annotations

from typing import Sequence, TypeVar, Union

import numpy as np
import torch

Signal = TypeVar("Signal", float, torch.Tensor, np.ndarray)


def rectify(x: Signal) -> Signal:
    """Half-wave rectifier ``0.5 * (|x| + x)``.

    Passes ``x`` unchanged when ``x >= 0`` and clamps to 0 otherwise, so the
    reflex responds to lengthening and never to shortening. Works on Python
    floats, tensors and arrays.
    """
    return 0.5 * (abs(x) + x)


def as_afferent_tensor(
    afferents: Union[torch.Tensor, np.ndarray, Sequence[float]],
    dtype: torch.dtype = torch.float64,
    device: Union[str, torch.device] = "cpu",
) -> torch.Tensor:
    """Convert afferent readings to a flat tensor of ``dtype`` on ``device``."""
    if isinstance(afferents, torch.Tensor):
        return afferents.detach().to(dtype=dtype, device=device).flatten()
    return torch.as_tensor(np.asarray(afferents, dtype=np.float64), dtype=dtype, device=device).flatten()
