"""
Rescue365 - Geospatial Utilities
Great-circle distances and range checks for report routing.
"""

import math
from typing import List, Tuple, Optional
from dataclasses import dataclass

from rescue365.core.constants import EARTH_RADIUS_KM, DEFAULT_RESCUE_RADIUS_METERS


@dataclass(frozen=True)
class Coordinate:
    """Geographic point with latitude and longitude in decimal degrees."""
    latitude: float
    longitude: float

    def to_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    @classmethod
    def from_mapping(cls, data: dict) -> Optional["Coordinate"]:
        """Build from a {"latitude", "longitude"} mapping, None if incomplete."""
        lat = data.get("latitude")
        lon = data.get("longitude")
        if lat is None or lon is None:
            return None
        return cls(latitude=float(lat), longitude=float(lon))


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in decimal degrees
        lat2, lon2: Second point coordinates in decimal degrees

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in meters
    """
    return haversine_distance(
        a.latitude, a.longitude,
        b.latitude, b.longitude
    ) * 1000.0


def is_within_range(
    a: Coordinate,
    b: Coordinate,
    radius_meters: float = DEFAULT_RESCUE_RADIUS_METERS
) -> bool:
    """Check whether two coordinates are at most radius_meters apart."""
    return distance_meters(a, b) <= radius_meters


def calculate_centroid(
    points: List[Tuple[float, float]]
) -> Tuple[float, float]:
    """
    Calculate the centroid (center of mass) of a set of points.

    Args:
        points: List of (latitude, longitude) tuples

    Returns:
        Tuple of (latitude, longitude) of the centroid
    """
    if not points:
        return (0.0, 0.0)

    lat_sum = sum(p[0] for p in points)
    lon_sum = sum(p[1] for p in points)
    n = len(points)

    return (lat_sum / n, lon_sum / n)
