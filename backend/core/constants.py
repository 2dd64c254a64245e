"""
Project-wide constants.

Centralizes magic numbers shared by the HGT reader, the shading
algorithm and the ground resolution math.
"""

# HGT sample encoding (big-endian signed 16-bit)
HGT_SAMPLE_DTYPE = ">i2"
HGT_SAMPLE_BYTES = 2
HGT_NODATA = -32768

# Web Mercator
EARTH_CIRCUMFERENCE_M = 40_075_016.686

# Map size factor applied to the tile axis length for ground resolution
PIXELS_PER_SAMPLE = 170

# Shading defaults
DEFAULT_LIGHT_HEIGHT_ANGLE = 50.0
SHADE_NEUTRAL_OFFSET = 127
