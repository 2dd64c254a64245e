"""
Elevation tile sources.

Defines the narrow interface the shading algorithm needs from a tile
(byte size, latitude bounds, sample stream) and a file-backed
implementation for SRTM-style HGT tiles, plain or zipped.

Tile names encode the south-west corner, e.g. ``N47E011.hgt`` covers
47..48 N, 11..12 E.
"""

import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)

_TILE_NAME_RE = re.compile(r"^([NS])(\d{1,2})([EW])(\d{1,3})", re.IGNORECASE)
_TILE_SUFFIXES = (".hgt", ".zip")


class ElevationSource(Protocol):
    """Anything the shading algorithm can read a square sample grid from."""

    @property
    def size(self) -> int: ...

    @property
    def south_latitude(self) -> float: ...

    @property
    def north_latitude(self) -> float: ...

    def open_stream(self) -> BinaryIO: ...


def parse_tile_name(name: str) -> tuple[int, int]:
    """
    Parse the south-west corner from an HGT tile file name.

    Parameters
    ----------
    name : str
        File name such as ``N47E011.hgt``, ``S05W073.hgt.zip``

    Returns
    -------
    tuple[int, int]
        (latitude, longitude) of the south-west corner [deg]

    Raises
    ------
    ValueError
        If the name doesn't start with a tile coordinate

    Examples
    --------
    >>> parse_tile_name("N47E011.hgt")
    (47, 11)
    >>> parse_tile_name("S05W073.hgt.zip")
    (-5, -73)
    """
    match = _TILE_NAME_RE.match(name)
    if match is None:
        raise ValueError(f"Not an HGT tile name: {name}")
    lat_hemi, lat, lon_hemi, lon = match.groups()
    latitude = int(lat) * (-1 if lat_hemi.upper() == "S" else 1)
    longitude = int(lon) * (-1 if lon_hemi.upper() == "W" else 1)
    return latitude, longitude


def _zip_member(archive: zipfile.ZipFile, path: Path) -> zipfile.ZipInfo:
    members = [
        info for info in archive.infolist() if info.filename.lower().endswith(".hgt")
    ]
    if len(members) != 1:
        raise ValueError(
            f"Expected exactly one .hgt entry in {path}, found {len(members)}"
        )
    return members[0]


@dataclass(frozen=True)
class HgtFile:
    """
    HGT tile stored on disk, either as ``.hgt`` or as a zip archive
    containing a single ``.hgt`` entry.
    """

    path: Path
    south: int
    west: int

    @classmethod
    def from_path(cls, path: Path | str) -> "HgtFile":
        """
        Create tile descriptor from a file path, reading bounds from its name.

        Raises
        ------
        FileNotFoundError
            If the file does not exist
        ValueError
            If the file name is not a tile coordinate
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"HGT file not found: {path}")
        south, west = parse_tile_name(path.name)
        return cls(path=path, south=south, west=west)

    @property
    def is_zipped(self) -> bool:
        return self.path.suffix.lower() == ".zip"

    @property
    def key(self) -> tuple[int, int]:
        return self.south, self.west

    @property
    def size(self) -> int:
        """Uncompressed size of the sample grid [bytes]."""
        if self.is_zipped:
            with zipfile.ZipFile(self.path) as archive:
                return _zip_member(archive, self.path).file_size
        return self.path.stat().st_size

    @property
    def south_latitude(self) -> float:
        return float(self.south)

    @property
    def north_latitude(self) -> float:
        return float(self.south + 1)

    def open_stream(self) -> BinaryIO:
        """
        Open the sample stream; the caller is responsible for closing it.

        For zip archives the archive stays open until the returned member
        stream is closed.
        """
        if not self.is_zipped:
            return open(self.path, "rb")

        archive = zipfile.ZipFile(self.path)
        try:
            return archive.open(_zip_member(archive, self.path))
        finally:
            # The member stream keeps its own reference to the file.
            archive.close()

    def __str__(self) -> str:
        return self.path.name


def find_hgt_files(directory: Path | str) -> dict[tuple[int, int], HgtFile]:
    """
    Index HGT tiles found under a directory.

    Parameters
    ----------
    directory : Path or str
        Root directory, searched recursively

    Returns
    -------
    dict
        (south latitude, west longitude) -> HgtFile

    Raises
    ------
    FileNotFoundError
        If directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"HGT directory not found: {directory}")

    tiles: dict[tuple[int, int], HgtFile] = {}
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in _TILE_SUFFIXES:
            continue
        try:
            tile = HgtFile.from_path(path)
        except ValueError as e:
            logger.warning(f"Skipping {path}: {e}")
            continue
        if tile.key in tiles:
            logger.warning(f"Duplicate tile {tile.key}: {path} ignored")
            continue
        tiles[tile.key] = tile

    logger.info(f"Found {len(tiles)} HGT tiles in {directory}")
    return tiles
