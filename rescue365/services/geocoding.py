"""
Reverse geocoding for Rescue365
Turns a position into a human-readable address via OpenStreetMap Nominatim.

Addresses are best effort: any failure yields an empty address rather
than failing the caller.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import httpx

from rescue365.core.config import Settings, settings as default_settings
from rescue365.core.geo_utils import Coordinate

logger = logging.getLogger(__name__)


@dataclass
class AddressParts:
    """Address breakdown of a position."""
    name: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_nominatim(cls, data: Dict[str, Any]) -> "AddressParts":
        address = data.get("address") or {}
        name = data.get("name") or address.get("road") or address.get("neighbourhood")
        if name and address.get("house_number") and not data.get("name"):
            name = f"{address['house_number']} {name}"
        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("municipality")
        )
        return cls(name=name or None, city=city, region=address.get("state"))


def format_address(parts: Optional[AddressParts]) -> str:
    """Join the known address parts as "name, city, region"."""
    if parts is None:
        return ""
    return ", ".join(p for p in (parts.name, parts.city, parts.region) if p)


class NominatimGeocoder:
    """
    Reverse geocoder using the Nominatim API.
    Nominatim's usage policy requires an identifying User-Agent.
    """

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "rescue365/1.0",
        timeout: float = 30.0
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def reverse(self, coordinate: Coordinate) -> Optional[AddressParts]:
        """
        Reverse geocode a position.

        Args:
            coordinate: Position to look up

        Returns:
            AddressParts, or None if the lookup failed
        """
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "format": "jsonv2",
            "addressdetails": 1,
        }

        try:
            with httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent}
            ) as client:
                response = client.get(f"{self.base_url}/reverse", params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Reverse geocoding failed for {coordinate.to_tuple()}: {e}")
            return None

        if not isinstance(data, dict) or "error" in data:
            logger.warning(f"No address found for {coordinate.to_tuple()}")
            return None

        return AddressParts.from_nominatim(data)

    def address_for(self, coordinate: Coordinate) -> str:
        """Formatted address for a position, empty if unknown."""
        return format_address(self.reverse(coordinate))


def get_geocoder(config: Optional[Settings] = None) -> NominatimGeocoder:
    """Get reverse geocoder for the current configuration."""
    config = config or default_settings
    return NominatimGeocoder(
        base_url=config.geocoder_url,
        user_agent=config.geocoder_user_agent,
        timeout=config.store_timeout_seconds
    )
