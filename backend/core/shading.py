"""
Diffuse light hillshading of HGT elevation tiles.

Simulates diffuse lighting without self-shadowing. Light values below and
above the flat-ground level are scaled separately, so both sides use the
full byte range while horizontal ground always maps to the same neutral
value (127) regardless of the light angle.

The raster is produced in a single pass over the sample stream: only one
row of elevations is held in memory at a time.
"""

import logging
import math
import struct
from typing import BinaryIO

import numpy as np

from core.constants import (
    DEFAULT_LIGHT_HEIGHT_ANGLE,
    HGT_NODATA,
    HGT_SAMPLE_BYTES,
    HGT_SAMPLE_DTYPE,
    PIXELS_PER_SAMPLE,
    SHADE_NEUTRAL_OFFSET,
)
from core.hgt_source import ElevationSource
from core.shading_result import ShadingResult
from utils.geometry import ground_resolution, interpolate_resolution

logger = logging.getLogger(__name__)


def height_angle_to_relative_height(height_angle: float) -> float:
    """
    Convert light source elevation angle to relative light height.

    Parameters
    ----------
    height_angle : float
        Angle of the light over the horizon [deg], 0-90

    Returns
    -------
    float
        Light height relative to a 1:1 diagonal step (0 for grazing light,
        very large close to 90 deg)
    """
    return math.tan(math.radians(height_angle)) * math.sqrt(2.0)


def axis_length(size: int) -> int:
    """
    Derive the number of shaded pixels per side from an HGT byte size.

    A tile of N+1 by N+1 big-endian int16 samples yields N pixels per side.

    Parameters
    ----------
    size : int
        Tile size in bytes

    Returns
    -------
    int
        Axis length N, or 0 if the size is not a square sample grid
    """
    elements = size // HGT_SAMPLE_BYTES
    row_len = math.ceil(math.sqrt(elements))
    if row_len == 0 or row_len * row_len * HGT_SAMPLE_BYTES != size:
        return 0
    return row_len - 1


def _read_row(stream: BinaryIO, row_len: int) -> np.ndarray:
    """Read one row of samples as int32, raising EOFError on a short read."""
    n_bytes = row_len * HGT_SAMPLE_BYTES
    buf = bytearray()
    while len(buf) < n_bytes:
        chunk = stream.read(n_bytes - len(buf))
        if not chunk:
            raise EOFError(
                f"Elevation stream ended after {len(buf)} of {n_bytes} row bytes"
            )
        buf += chunk
    return np.frombuffer(bytes(buf), dtype=HGT_SAMPLE_DTYPE).astype(np.int32)


def _fill_missing_in_row(samples: np.ndarray) -> np.ndarray:
    """
    Replace missing samples with the previous sample in read order.

    Used for the first row only, where no northern neighbour exists.
    A missing sample at the very start becomes 0.
    """
    filled = np.empty_like(samples)
    last = 0
    for col, sample in enumerate(samples.tolist()):
        if sample != HGT_NODATA:
            last = sample
        filled[col] = last
    return filled


def _bits(value: float) -> int:
    return struct.unpack(">q", struct.pack(">d", value))[0]


class DiffuseLightShading:
    """
    Diffuse light shading algorithm for square HGT tiles.

    Instances are immutable and compare equal when their light heights are
    bit-identical, so they can be used as cache keys.
    """

    def __init__(self, height_angle: float = DEFAULT_LIGHT_HEIGHT_ANGLE):
        """
        Parameters
        ----------
        height_angle : float
            Angle of the light source over the ground [deg], 0-90
        """
        self._a = height_angle_to_relative_height(height_angle)
        self._ast2 = math.sqrt(2.0 + self._a * self._a)
        self._neutral = self.raw_intensity(0.0, 0.0)

    @property
    def light_height(self) -> float:
        """Relative light height derived from the height angle."""
        return self._a

    @property
    def neutral(self) -> float:
        """Raw intensity of perfectly flat ground."""
        return self._neutral

    def raw_intensity(self, n, e):
        """
        Light hitting a surface with the given slopes, 0..1.

        The surface normal implied by north-south slope ``n`` and east-west
        slope ``e`` is projected onto the light direction and divided by its
        length. Accepts scalars or numpy arrays.
        """
        n = np.asarray(n, dtype=np.float64)
        e = np.asarray(e, dtype=np.float64)
        norm_plane_dist = (e + n + self._a) / (self._ast2 * np.sqrt(n * n + e * e + 1))
        lightness = np.maximum(0.0, norm_plane_dist)
        if lightness.ndim == 0:
            return float(lightness)
        return lightness

    def signed_intensity(self, n, e):
        """
        Shade relative to flat ground, roughly -128..127.

        Values darker than flat ground are scaled by the distance from
        neutral down to 0, brighter values by the distance up to 1.
        Rounds halves up. Returns int for scalar input, an int64 array
        otherwise.
        """
        v = np.asarray(self.raw_intensity(n, e), dtype=np.float64) - self._neutral
        with np.errstate(divide="ignore", invalid="ignore"):
            darker = np.floor(128 * (v / self._neutral) + 0.5)
            brighter = np.floor(127 * (v / (1.0 - self._neutral)) + 0.5)
        shade = np.where(v < 0, darker, np.where(v > 0, brighter, 0.0))
        shade = shade.astype(np.int64)
        if shade.ndim == 0:
            return int(shade)
        return shade

    def get_axis_length(self, source: ElevationSource) -> int:
        return axis_length(source.size)

    def transform_to_result(
        self, source: ElevationSource, padding: int
    ) -> ShadingResult | None:
        """
        Shade a whole elevation tile.

        Parameters
        ----------
        source : ElevationSource
            Tile providing size, latitude bounds and the sample stream
        padding : int
            Border width left around the shaded pixels [px]

        Returns
        -------
        ShadingResult or None
            Shaded raster, or None if the tile is malformed or could not
            be read completely

        Raises
        ------
        ValueError
            If padding is negative
        """
        if padding < 0:
            raise ValueError(f"Padding must be non-negative, got {padding}")

        axis = self.get_axis_length(source)
        if axis == 0:
            logger.warning(
                f"Tile {source} has {source.size} bytes, not a square sample grid"
            )
            return None

        try:
            with source.open_stream() as stream:
                data = self.convert(
                    stream,
                    axis,
                    padding,
                    source.south_latitude,
                    source.north_latitude,
                )
        except (OSError, EOFError) as e:
            logger.error(f"Shading failed for {source}: {e}", exc_info=True)
            return None

        return ShadingResult(data=data, width=axis, height=axis, padding=padding)

    def convert(
        self,
        stream: BinaryIO,
        axis_length: int,
        padding: int,
        south_latitude: float,
        north_latitude: float,
    ) -> np.ndarray:
        """
        Scan the sample stream row by row into a padded shade raster.

        Each output pixel is shaded from the 2x2 block of samples at its
        corners. The previous row is kept in a ring buffer that the next
        row overwrites in place, so memory use is one row of samples.

        Parameters
        ----------
        stream : BinaryIO
            Readable stream of (axis_length+1)^2 big-endian int16 samples
        axis_length : int
            Shaded pixels per side
        padding : int
            Border width [px]
        south_latitude, north_latitude : float
            Tile latitude bounds [deg]

        Returns
        -------
        np.ndarray
            uint8 array of shape (axis_length + 2*padding,) * 2

        Raises
        ------
        EOFError
            If the stream ends before all samples are read
        ValueError
            If axis_length is not positive or padding is negative
        """
        if axis_length <= 0:
            raise ValueError(f"Axis length must be positive, got {axis_length}")
        if padding < 0:
            raise ValueError(f"Padding must be non-negative, got {padding}")

        row_len = axis_length + 1
        side = axis_length + 2 * padding
        shaded = np.zeros((side, side), dtype=np.uint8)

        ring = np.empty(row_len, dtype=np.int16)
        ring[:] = _fill_missing_in_row(_read_row(stream, row_len))

        map_size = axis_length * PIXELS_PER_SAMPLE
        south_per_pixel = ground_resolution(south_latitude, map_size)
        north_per_pixel = ground_resolution(north_latitude, map_size)

        for line in range(1, axis_length + 1):
            north = ring.astype(np.int32)
            south = _read_row(stream, row_len)
            south = np.where(south == HGT_NODATA, north, south)
            ring[:] = south

            nw, ne = north[:-1], north[1:]
            sw, se = south[:-1], south[1:]

            noso = -((se - ne) + (sw - nw))
            eawe = -((ne - nw) + (se - sw))

            half_meters_per_pixel = (
                interpolate_resolution(
                    south_per_pixel, north_per_pixel, line, axis_length
                )
                / 2
            )

            zero_is_flat = self.signed_intensity(
                noso / half_meters_per_pixel, eawe / half_meters_per_pixel
            )
            row = padding + line - 1
            shaded[row, padding : padding + axis_length] = np.clip(
                zero_is_flat + SHADE_NEUTRAL_OFFSET, 0, 255
            )

        logger.debug(
            f"Shaded {axis_length}x{axis_length} tile "
            f"({south_latitude}..{north_latitude} deg), padding {padding}"
        )
        return shaded

    def __eq__(self, other):
        if self is other:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return _bits(self._a) == _bits(other._a)

    def __hash__(self):
        return hash(_bits(self._a))

    def __repr__(self):
        return f"{type(self).__name__}(light_height={self._a!r})"
