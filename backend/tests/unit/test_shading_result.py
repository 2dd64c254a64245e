"""Tests for core.shading_result module."""

import numpy as np
import pytest

from core.shading_result import ShadingResult


class TestShadingResult:
    """Tests for ShadingResult dataclass."""

    def test_interior_excludes_padding(self):
        data = np.zeros((5, 5), dtype=np.uint8)
        data[1:4, 1:4] = 127
        result = ShadingResult(data=data, width=3, height=3, padding=1)
        assert result.interior.shape == (3, 3)
        assert np.all(result.interior == 127)

    def test_no_padding(self):
        data = np.full((2, 2), 7, dtype=np.uint8)
        result = ShadingResult(data=data, width=2, height=2, padding=0)
        assert result.to_bytes() == bytes([7, 7, 7, 7])

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            ShadingResult(
                data=np.zeros((3, 3), dtype=np.uint8), width=3, height=3, padding=1
            )
