"""
Shared test fixtures for pytest.

Provides in-memory elevation tiles and HGT files on disk used across
unit tests.
"""

import io
import zipfile
from dataclasses import dataclass

import numpy as np
import pytest

from core.shading import DiffuseLightShading


def hgt_bytes(grid) -> bytes:
    """Encode a 2-D elevation grid as big-endian int16 HGT bytes."""
    return np.asarray(grid, dtype=">i2").tobytes()


@dataclass(eq=False)
class MemoryTile:
    """ElevationSource backed by an in-memory byte string, hashed by identity."""

    data: bytes
    south_latitude: float = 47.0
    north_latitude: float = 48.0
    opened: int = 0
    closed: int = 0

    @property
    def size(self) -> int:
        return len(self.data)

    def open_stream(self):
        self.opened += 1
        tile = self

        class _Stream(io.BytesIO):
            def close(self):
                if not self.closed:
                    tile.closed += 1
                super().close()

        return _Stream(self.data)


@pytest.fixture
def algorithm():
    """Shading algorithm with the default light angle."""
    return DiffuseLightShading()


@pytest.fixture
def make_tile():
    """Factory for in-memory tiles from a sample grid or raw bytes."""

    def _make(grid, south_latitude=47.0, north_latitude=48.0):
        data = grid if isinstance(grid, bytes) else hgt_bytes(grid)
        return MemoryTile(data, south_latitude, north_latitude)

    return _make


@pytest.fixture
def flat_tile(make_tile):
    """3x3 samples (axis length 2), all at 1000 m."""
    return make_tile(np.full((3, 3), 1000))


@pytest.fixture
def ridge_grid():
    """
    5x5 samples with a north-south ridge along the middle column.

        100 100 1000 100 100
        ...
    """
    grid = np.full((5, 5), 100, dtype=np.int32)
    grid[:, 2] = 1000
    return grid


@pytest.fixture
def hgt_file(tmp_path, ridge_grid):
    """Plain HGT file on disk for the ridge grid."""
    path = tmp_path / "N47E011.hgt"
    path.write_bytes(hgt_bytes(ridge_grid))
    return path


@pytest.fixture
def zipped_hgt_file(tmp_path, ridge_grid):
    """Zip archive with a single HGT entry for the ridge grid."""
    path = tmp_path / "S05W073.hgt.zip"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("S05W073.hgt", hgt_bytes(ridge_grid))
    return path
