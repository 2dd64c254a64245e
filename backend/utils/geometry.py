"""
Ground resolution utilities.

Provides the Web Mercator meters-per-pixel conversion used to turn
elevation differences between neighbouring HGT samples into slopes.
"""

import math

from core.constants import EARTH_CIRCUMFERENCE_M


def ground_resolution(latitude: float, map_size: float) -> float:
    """
    Calculate ground resolution at a latitude for a given map size.

    Parameters
    ----------
    latitude : float
        Latitude in WGS84 (decimal degrees)
    map_size : float
        Width of the whole world map in pixels

    Returns
    -------
    float
        Distance on the ground covered by one pixel [m]

    Raises
    ------
    ValueError
        If map_size is not positive

    Examples
    --------
    >>> round(ground_resolution(0.0, 256), 2)
    156543.03
    """
    if map_size <= 0:
        raise ValueError(f"Map size must be positive, got {map_size}")
    return math.cos(math.radians(latitude)) * EARTH_CIRCUMFERENCE_M / map_size


def interpolate_resolution(
    south_resolution: float,
    north_resolution: float,
    line: int,
    lines: int,
) -> float:
    """
    Linearly blend south and north edge resolutions for a tile row.

    Row ``lines`` lies on the south edge, row 0 on the north edge.
    """
    return (south_resolution * line + north_resolution * (lines - line)) / lines
