"""
Rescue365 - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Dict, List

# =============================================================================
# DISTANCES
# =============================================================================

# Earth's radius in kilometers
EARTH_RADIUS_KM: float = 6371.0

METERS_PER_MILE: float = 1609.34

# Rescuers see reports within this radius of their position
DEFAULT_RESCUE_RADIUS_MILES: float = 10.0
DEFAULT_RESCUE_RADIUS_METERS: float = DEFAULT_RESCUE_RADIUS_MILES * METERS_PER_MILE

# =============================================================================
# REPORT LIFECYCLE
# =============================================================================

STATUS_PENDING: str = "Pending"
STATUS_IN_PROGRESS: str = "Rescue In Progress"
STATUS_COMPLETE: str = "Rescue Complete"

# Known states in lifecycle order
STATUS_ORDER: List[str] = [
    STATUS_PENDING,
    STATUS_IN_PROGRESS,
    STATUS_COMPLETE,
]

# Statuses after which a report leaves active routing
TERMINAL_STATUSES: List[str] = [STATUS_COMPLETE]

# =============================================================================
# MAPS
# =============================================================================

# External map application URL templates by platform
MAP_URL_TEMPLATES: Dict[str, str] = {
    "ios": "maps://?q={lat},{lng}",
    "android": "geo:{lat},{lng}",
    "web": "https://www.google.com/maps/search/?api=1&query={lat},{lng}",
}

# Marker colors for report statuses on the map
STATUS_COLORS: Dict[str, str] = {
    STATUS_PENDING: "red",
    STATUS_IN_PROGRESS: "orange",
    STATUS_COMPLETE: "green",
}
