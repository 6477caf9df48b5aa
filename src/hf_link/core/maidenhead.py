"""
Maidenhead Grid Locator Codec

Converts between Maidenhead grid locators (e.g. "JO59" or "JO59jp") and
geographic coordinates.

Locator structure:
    Field     (chars 1-2): A-R,  20 deg longitude x 10 deg latitude
    Square    (chars 3-4): 0-9,   2 deg longitude x  1 deg latitude
    Subsquare (chars 5-6): A-X,   5' longitude  x 2.5' latitude

Decoding always returns the centre of the smallest cell the locator
resolves, so a 6-character locator gets a half-subsquare offset
(2.5' lon, 1.25' lat) rather than the half-square offset of a 4-character one.
"""

import math
import re
from dataclasses import dataclass
from typing import Union

from ..errors import InvalidLocatorFormat

_LOCATOR_RE = re.compile(r'^[A-R]{2}[0-9]{2}([A-X]{2})?$', re.IGNORECASE)

# Cell sizes in degrees (lon, lat)
FIELD_SIZE = (20.0, 10.0)
SQUARE_SIZE = (2.0, 1.0)
SUBSQUARE_SIZE = (5.0 / 60.0, 2.5 / 60.0)


@dataclass(frozen=True)
class Coordinate:
    """Geographic point in degrees (positive = North / East)"""
    lat: float
    lon: float

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range [-90, 90]: {self.lat}")
        if not -180.0 <= self.lon <= 180.0:
            raise ValueError(f"Longitude out of range [-180, 180]: {self.lon}")

    def __str__(self) -> str:
        ns = 'N' if self.lat >= 0 else 'S'
        ew = 'E' if self.lon >= 0 else 'W'
        return f"{abs(self.lat):.4f}°{ns} {abs(self.lon):.4f}°{ew}"


@dataclass(frozen=True)
class GridLocator:
    """
    Validated Maidenhead locator.

    Stored in the conventional form: field and square upper case, subsquare
    lower case ("JO59jp"), so locators compare equal regardless of the case
    they were entered in.
    """
    text: str

    def __post_init__(self):
        if not isinstance(self.text, str) or not _LOCATOR_RE.match(self.text):
            raise InvalidLocatorFormat(self.text)
        canonical = self.text[:4].upper() + self.text[4:].lower()
        object.__setattr__(self, 'text', canonical)

    @classmethod
    def parse(cls, locator: Union[str, 'GridLocator']) -> 'GridLocator':
        if isinstance(locator, GridLocator):
            return locator
        if isinstance(locator, str):
            locator = locator.strip()
        return cls(locator)

    @property
    def precision(self) -> int:
        return len(self.text)

    @property
    def square(self) -> 'GridLocator':
        """The enclosing 4-character square"""
        return GridLocator(self.text[:4])

    def __str__(self) -> str:
        return self.text


def is_valid_locator(locator: object) -> bool:
    """True for a 4 or 6 character Maidenhead locator (any case)"""
    return isinstance(locator, str) and bool(_LOCATOR_RE.match(locator.strip()))


def cell_origin(locator: Union[str, GridLocator]) -> Coordinate:
    """South-west corner of the cell named by the locator"""
    grid = GridLocator.parse(locator).text.upper()

    lon = (ord(grid[0]) - ord('A')) * FIELD_SIZE[0] - 180.0
    lat = (ord(grid[1]) - ord('A')) * FIELD_SIZE[1] - 90.0

    lon += int(grid[2]) * SQUARE_SIZE[0]
    lat += int(grid[3]) * SQUARE_SIZE[1]

    if len(grid) == 6:
        lon += (ord(grid[4]) - ord('A')) * SUBSQUARE_SIZE[0]
        lat += (ord(grid[5]) - ord('A')) * SUBSQUARE_SIZE[1]

    return Coordinate(lat=lat, lon=lon)


def cell_size(locator: Union[str, GridLocator]) -> tuple:
    """(lon, lat) size in degrees of the smallest cell the locator resolves"""
    return SUBSQUARE_SIZE if GridLocator.parse(locator).precision == 6 else SQUARE_SIZE


def decode(locator: Union[str, GridLocator]) -> Coordinate:
    """
    Convert a grid locator to the coordinate of its cell centre.

    Args:
        locator: 4 or 6 character locator, case-insensitive

    Returns:
        Coordinate at the centre of the resolved cell

    Raises:
        InvalidLocatorFormat: locator has the wrong length or characters
    """
    origin = cell_origin(locator)
    size_lon, size_lat = cell_size(locator)
    return Coordinate(lat=origin.lat + size_lat / 2.0, lon=origin.lon + size_lon / 2.0)


def _cell_index(offset: float, size: float, count: int) -> int:
    # Points on the far edge (lat=+90, lon=+180) belong to the last cell
    return min(max(int(math.floor(offset / size)), 0), count - 1)


def encode(coordinate: Coordinate, precision: int = 4) -> GridLocator:
    """
    Convert a coordinate to the locator of the cell containing it.

    Args:
        coordinate: Point to encode
        precision: 4 (square) or 6 (subsquare)

    Returns:
        GridLocator whose cell contains the coordinate
    """
    if precision not in (4, 6):
        raise ValueError(f"precision must be 4 or 6, got {precision}")

    lon = coordinate.lon + 180.0
    lat = coordinate.lat + 90.0

    field_lon = _cell_index(lon, FIELD_SIZE[0], 18)
    field_lat = _cell_index(lat, FIELD_SIZE[1], 18)
    lon -= field_lon * FIELD_SIZE[0]
    lat -= field_lat * FIELD_SIZE[1]

    square_lon = _cell_index(lon, SQUARE_SIZE[0], 10)
    square_lat = _cell_index(lat, SQUARE_SIZE[1], 10)
    lon -= square_lon * SQUARE_SIZE[0]
    lat -= square_lat * SQUARE_SIZE[1]

    text = (chr(ord('A') + field_lon) + chr(ord('A') + field_lat)
            + str(square_lon) + str(square_lat))

    if precision == 6:
        sub_lon = _cell_index(lon, SUBSQUARE_SIZE[0], 24)
        sub_lat = _cell_index(lat, SUBSQUARE_SIZE[1], 24)
        text += chr(ord('a') + sub_lon) + chr(ord('a') + sub_lat)

    return GridLocator(text)
