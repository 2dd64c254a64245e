"""
Utility functions for the hillshading backend.
"""

from utils.geometry import (
    ground_resolution,
    interpolate_resolution,
)

__all__ = [
    "ground_resolution",
    "interpolate_resolution",
]
