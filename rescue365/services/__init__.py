"""
Rescue365 - External Services
Sign-in through Supabase Auth and reverse geocoding through Nominatim.
"""

from rescue365.services.auth import (
    SupabaseAuthClient,
    AuthUser,
    AuthSession,
    TokenPair,
    extract_tokens_from_url,
    get_auth_client,
)
from rescue365.services.geocoding import (
    NominatimGeocoder,
    AddressParts,
    format_address,
    get_geocoder,
)

__all__ = [
    # Auth
    "SupabaseAuthClient",
    "AuthUser",
    "AuthSession",
    "TokenPair",
    "extract_tokens_from_url",
    "get_auth_client",
    # Geocoding
    "NominatimGeocoder",
    "AddressParts",
    "format_address",
    "get_geocoder",
]
