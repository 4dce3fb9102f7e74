"""
Interneuron - weighted hard-threshold stage of the reflex arc.

The modeled neuron is excitatory only and has no membrane dynamics: it sums
its afferents with fixed weights and fires the summed drive when, and only
when, the drive is strictly above its threshold. Below threshold it is
silent (output 0). This is the firing rule of the neuron, not a generic
activation function, so there is no smooth sigmoid.

    drive  = sum_i weight_i * afferent_i
    output = drive   if drive > threshold
             0.0     otherwise

A threshold below machine epsilon means the neuron always fires.

The afferent count is checked once when the circuit finalizes
(``check_afferent_count``), not on every evaluation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import numpy as np
import torch
import torch.nn as nn

from myoreflex.config.circuit_config import InterneuronConfig
from myoreflex.constants import EPSILON
from myoreflex.errors import ConfigurationError
from myoreflex.utils.signal_utils import as_afferent_tensor


class Interneuron(nn.Module):
    """Weighted threshold interneuron.

    Args:
        config: Weights and threshold
        name: Component name used in error messages
    """

    def __init__(self, config: InterneuronConfig, name: str = "interneuron"):
        config.validate()
        super().__init__()

        self.config = config
        self.name = name
        self.threshold = float(config.threshold)
        self._dtype = config.get_torch_dtype()

        self.register_buffer(
            "weights",
            torch.tensor(list(config.weights), dtype=self._dtype, device=config.get_torch_device()),
        )

        self._signal: float = 0.0
        self._fired = False
        self._last_drive: Optional[float] = None

    @property
    def n_afferents(self) -> int:
        return int(self.weights.shape[0])

    @property
    def always_fires(self) -> bool:
        return self.threshold < EPSILON

    def check_afferent_count(self, n_afferents: int) -> None:
        """Validate the number of connected afferents against the weights.

        Raises:
            ConfigurationError: If the counts differ
        """
        if n_afferents != self.n_afferents:
            raise ConfigurationError(
                f"Interneuron '{self.name}' has {self.n_afferents} weights but "
                f"{n_afferents} afferents are connected"
            )

    def forward(self, afferents: Union[torch.Tensor, np.ndarray, Sequence[float]]) -> float:  # type: ignore[override]
        """Evaluate the neuron for the current afferent readings.

        Returns:
            Published output signal (0.0 when silent)
        """
        x = as_afferent_tensor(afferents, dtype=self._dtype, device=self.weights.device)
        drive = float(torch.dot(self.weights, x).item())

        fired = self.always_fires or drive > self.threshold
        signal = drive if fired else 0.0

        self._fired = fired
        self._last_drive = drive
        self._signal = signal
        return signal

    def get_signal(self) -> float:
        """Output published by the most recent evaluation."""
        return self._signal

    def set_signal(self, signal: float) -> None:
        """Override the published output (e.g., to seed a replayed run)."""
        self._signal = float(signal)

    def reset_state(self) -> None:
        self._signal = 0.0
        self._fired = False
        self._last_drive = None

    def get_diagnostics(self) -> Dict[str, Any]:
        return {
            "n_afferents": self.n_afferents,
            "threshold": self.threshold,
            "last_drive": self._last_drive,
            "signal": self._signal,
            "fired": self._fired,
        }

    def extra_repr(self) -> str:
        return f"name={self.name!r}, n_afferents={self.n_afferents}, threshold={self.threshold}"
