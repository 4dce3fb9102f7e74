"""
Tests for the half-wave rectifier and afferent conversion.
"""

import numpy as np
import pytest
import torch

from myoreflex.utils.signal_utils import as_afferent_tensor, rectify


@pytest.mark.unit
class TestRectify:
    """rect(x) = 0.5 * (|x| + x)"""

    @pytest.mark.parametrize("x", [0.0, 1e-12, 0.02, 1.0, 250.0])
    def test_passes_non_negative_values(self, x):
        assert rectify(x) == x

    @pytest.mark.parametrize("x", [-1e-12, -0.02, -1.0, -250.0])
    def test_clamps_negative_values(self, x):
        assert rectify(x) == 0.0

    def test_tensor_input(self):
        x = torch.tensor([-2.0, -0.5, 0.0, 0.5, 2.0], dtype=torch.float64)
        expected = torch.tensor([0.0, 0.0, 0.0, 0.5, 2.0], dtype=torch.float64)
        assert torch.equal(rectify(x), expected)

    def test_numpy_input(self):
        x = np.array([-3.0, 3.0])
        np.testing.assert_array_equal(rectify(x), np.array([0.0, 3.0]))


@pytest.mark.unit
def test_as_afferent_tensor_from_list():
    t = as_afferent_tensor([0.3, 0.1, 0.2])
    assert t.dtype == torch.float64
    assert t.shape == (3,)


@pytest.mark.unit
def test_as_afferent_tensor_flattens_and_casts():
    t = as_afferent_tensor(torch.ones(1, 3, dtype=torch.float32))
    assert t.dtype == torch.float64
    assert t.shape == (3,)
