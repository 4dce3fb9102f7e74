"""
Base Configuration Classes.

Every component config inherits the tensor placement fields from here so that
delay histories, interneuron weights and control vectors agree on device and
precision.
"""

from __future__ import annotations

from dataclasses import dataclass

import torch

from myoreflex.errors import ConfigurationError


@dataclass
class BaseConfig:
    """Base configuration with common fields for all components.

    - device: Hardware device (cpu/cuda)
    - dtype: Tensor data type
    """

    device: str = "cpu"
    """Device to run on: 'cpu', 'cuda', 'cuda:0', etc."""

    dtype: str = "float64"
    """Data type for signal tensors. Simulation times need double precision."""

    def get_torch_device(self) -> torch.device:
        """Get PyTorch device object."""
        return torch.device(self.device)

    def get_torch_dtype(self) -> torch.dtype:
        """Get PyTorch dtype object."""
        dtype_map = {
            "float64": torch.float64,
            "float32": torch.float32,
        }
        if self.dtype not in dtype_map:
            raise ConfigurationError(
                f"Unknown dtype '{self.dtype}'. "
                f"Choose from: {list(dtype_map.keys())}"
            )
        return dtype_map[self.dtype]
