"""
Rescue365 - Core Utilities
Central configuration, logging, errors and geospatial helpers.
"""

from rescue365.core.config import settings
from rescue365.core.constants import (
    DEFAULT_RESCUE_RADIUS_METERS,
    METERS_PER_MILE,
    STATUS_ORDER,
)
from rescue365.core.exceptions import (
    Rescue365Error,
    PermissionDenied,
    ValidationError,
    StoreError,
    AuthError,
    TransitionError,
    ConfigurationError,
)
from rescue365.core.geo_utils import (
    Coordinate,
    haversine_distance,
    distance_meters,
    is_within_range,
)

__all__ = [
    "settings",
    "DEFAULT_RESCUE_RADIUS_METERS",
    "METERS_PER_MILE",
    "STATUS_ORDER",
    "Rescue365Error",
    "PermissionDenied",
    "ValidationError",
    "StoreError",
    "AuthError",
    "TransitionError",
    "ConfigurationError",
    "Coordinate",
    "haversine_distance",
    "distance_meters",
    "is_within_range",
]
