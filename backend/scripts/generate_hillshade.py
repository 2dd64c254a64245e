"""
Generate a grayscale hillshade PNG from an HGT elevation tile.

Shades the tile with diffuse lighting and writes the raw intensity
raster (0 = darkest, 127 = flat, 255 = brightest) as an 8-bit PNG.

Usage:
    python -m scripts.generate_hillshade --input ../data/hgt/N47E011.hgt \
        --output ../data/hillshade/N47E011.png --angle 50 --padding 0
"""

import argparse
import logging
import sys
from pathlib import Path

from PIL import Image

from core.config import get_settings
from core.hgt_source import HgtFile
from core.shading import DiffuseLightShading
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def generate_hillshade(
    input_path: str,
    output_png: str,
    height_angle: float,
    padding: int = 0,
) -> bool:
    """
    Shade one tile and save it as PNG.

    Returns
    -------
    bool
        False if the tile is malformed or could not be read
    """
    tile = HgtFile.from_path(input_path)
    algorithm = DiffuseLightShading(height_angle)

    axis = algorithm.get_axis_length(tile)
    print(f"Tile {tile}: {tile.south_latitude}..{tile.north_latitude} N, axis {axis}")

    result = algorithm.transform_to_result(tile, padding)
    if result is None:
        return False

    Path(output_png).parent.mkdir(parents=True, exist_ok=True)
    img = Image.fromarray(result.data)
    img.save(output_png, optimize=True)
    file_size = Path(output_png).stat().st_size
    print(f"PNG saved: {output_png} ({img.width}x{img.height}, {file_size / 1024:.0f} KB)")
    return True


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Generate hillshade PNG from HGT tile")
    parser.add_argument(
        "--input",
        required=True,
        help="Input tile (.hgt or .zip): path, or file name inside HGT_DIR",
    )
    parser.add_argument("--output", required=True, help="Output PNG path")
    parser.add_argument(
        "--angle",
        type=float,
        default=settings.light_height_angle,
        help=(
            "Light height over the horizon in degrees, 0-90 "
            f"(default: {settings.light_height_angle})"
        ),
    )
    parser.add_argument(
        "--padding",
        type=int,
        default=settings.padding,
        help=f"Empty border around the shaded pixels (default: {settings.padding})",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    configure_logging(args.log_level)

    input_path = Path(args.input)
    if not input_path.exists():
        # Bare tile names are looked up in HGT_DIR
        input_path = Path(settings.hgt_dir) / args.input
    if not input_path.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    if not 0 <= args.angle <= 90:
        print(f"Error: angle must be within 0-90, got {args.angle}", file=sys.stderr)
        sys.exit(1)
    if args.padding < 0:
        print(f"Error: padding must be non-negative, got {args.padding}", file=sys.stderr)
        sys.exit(1)

    try:
        ok = generate_hillshade(str(input_path), args.output, args.angle, args.padding)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not ok:
        print(f"Error: could not shade {args.input}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
