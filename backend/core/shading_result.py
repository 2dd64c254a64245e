"""
Output artifact of the shading algorithm.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class ShadingResult:
    """
    Shaded raster of one elevation tile, surrounded by a padding border.

    Byte semantics: 0 = minimum light, 127 = flat ground, 255 = maximum light.
    Padding cells are left at 0; filling them with neighbouring tiles'
    borders is up to the consumer.

    Attributes
    ----------
    data : np.ndarray
        uint8 array of shape (height + 2*padding, width + 2*padding)
    width : int
        Shaded pixels per row (tile axis length)
    height : int
        Shaded rows (tile axis length)
    padding : int
        Border width on every side [px]
    """

    data: np.ndarray
    width: int
    height: int
    padding: int

    def __post_init__(self):
        expected = (self.height + 2 * self.padding, self.width + 2 * self.padding)
        if self.data.shape != expected:
            raise ValueError(
                f"Buffer shape {self.data.shape} doesn't match "
                f"{self.width}x{self.height} tile with padding {self.padding}"
            )

    @property
    def interior(self) -> np.ndarray:
        """View of the shaded pixels without the padding border."""
        p = self.padding
        return self.data[p : p + self.height, p : p + self.width]

    def to_bytes(self) -> bytes:
        """Row-major byte buffer including padding."""
        return self.data.tobytes()
