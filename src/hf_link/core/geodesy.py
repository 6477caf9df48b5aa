"""
Great-circle geometry between stations

Haversine distance on a spherical Earth (R = 6371 km), initial bearing and
path midpoint for display, plus the coarse day/night and distance-bucket
classification used by the propagation estimator.
"""

import math
from enum import Enum
from typing import Union

from .maidenhead import Coordinate, GridLocator, decode

EARTH_RADIUS_KM = 6371.0

DAY_START_HOUR = 6
DAY_END_HOUR = 18


class DistanceBucket(Enum):
    """Coarse path length classes"""
    SHORT = "short"              # < 500 km
    MEDIUM = "medium"            # < 1500 km
    MEDIUM_LONG = "medium_long"  # < 3000 km
    LONG = "long"                # >= 3000 km


# Upper bounds (exclusive) for each bucket
_BUCKET_LIMITS_KM = (
    (500.0, DistanceBucket.SHORT),
    (1500.0, DistanceBucket.MEDIUM),
    (3000.0, DistanceBucket.MEDIUM_LONG),
)


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two points using the Haversine formula.

    Symmetric in its arguments; identical points give exactly 0.
    """
    if a == b:
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for near-antipodal points
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def locator_distance_km(locator1: Union[str, GridLocator],
                        locator2: Union[str, GridLocator]) -> float:
    """Distance between the centres of two grid locators"""
    return distance_km(decode(locator1), decode(locator2))


def initial_bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial great-circle bearing from a to b (degrees 0..360, 0 = North)"""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)
    x = math.sin(dlon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    bearing = (math.degrees(math.atan2(x, y)) + 360.0) % 360.0
    # (-tiny + 360) % 360 rounds to 360.0
    return 0.0 if bearing >= 360.0 else bearing


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """Geographic midpoint of the great-circle path between two points"""
    lat1_r = math.radians(a.lat)
    lon1_r = math.radians(a.lon)
    lat2_r = math.radians(b.lat)
    lon2_r = math.radians(b.lon)

    # Average the unit vectors and project back onto the sphere
    x = (math.cos(lat1_r) * math.cos(lon1_r) + math.cos(lat2_r) * math.cos(lon2_r)) / 2
    y = (math.cos(lat1_r) * math.sin(lon1_r) + math.cos(lat2_r) * math.sin(lon2_r)) / 2
    z = (math.sin(lat1_r) + math.sin(lat2_r)) / 2

    lon = math.atan2(y, x)
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    return Coordinate(lat=math.degrees(lat), lon=math.degrees(lon))


def is_daytime(hour: int) -> bool:
    """True if the local hour falls in [06:00, 18:00)"""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0..23, got {hour}")
    return DAY_START_HOUR <= hour < DAY_END_HOUR


def classify_distance(distance: float) -> DistanceBucket:
    if distance < 0:
        raise ValueError(f"distance must be non-negative, got {distance}")
    for limit, bucket in _BUCKET_LIMITS_KM:
        if distance < limit:
            return bucket
    return DistanceBucket.LONG
