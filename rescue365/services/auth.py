"""
Supabase Auth client for Rescue365

Sign-in is delegated to an OAuth provider through Supabase Auth (GoTrue).
The app only needs to know whether a user is signed in and who they are.

API Documentation: https://supabase.com/docs/reference/api
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs, urlparse

import httpx

from rescue365.core.config import Settings, settings as default_settings
from rescue365.core.exceptions import AuthError, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
    """Access and refresh tokens returned by the OAuth redirect."""
    access_token: str
    refresh_token: str


@dataclass
class AuthUser:
    """Signed-in user."""
    id: str
    email: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            metadata=data.get("user_metadata") or {},
        )


@dataclass
class AuthSession:
    """Tokens plus the user they belong to."""
    access_token: str
    refresh_token: str
    user: AuthUser

    @property
    def tokens(self) -> TokenPair:
        return TokenPair(self.access_token, self.refresh_token)


def extract_tokens_from_url(url: str) -> Optional[TokenPair]:
    """
    Read the tokens from an OAuth redirect URL.

    Supabase puts them in the URL fragment:
    rescue365://auth/callback#access_token=...&refresh_token=...

    Returns:
        TokenPair, or None if either token is missing
    """
    fragment = urlparse(url).fragment
    if not fragment and "#" in url:
        fragment = url.split("#", 1)[1]

    params = parse_qs(fragment)
    access_token = params.get("access_token", [None])[0]
    refresh_token = params.get("refresh_token", [None])[0]

    if not access_token or not refresh_token:
        return None
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


class SupabaseAuthClient:
    """
    Client for the Supabase Auth REST API.

    Usage:
        auth = SupabaseAuthClient(url="https://xyz.supabase.co", api_key="...")
        url = auth.authorize_url("google", "rescue365://auth/callback")
    """

    def __init__(self, url: str, api_key: str, timeout: float = 30.0):
        """
        Initialize auth client.

        Args:
            url: Supabase project URL
            api_key: Project anon key
            timeout: HTTP request timeout in seconds
        """
        if not url or not api_key:
            raise ConfigurationError("Supabase URL and key are required")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @property
    def auth_url(self) -> str:
        return f"{self.url}/auth/v1"

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }

    def _request(
        self,
        method: str,
        path: str,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.request(
                    method,
                    f"{self.auth_url}{path}",
                    params=params,
                    json=json,
                    headers=self._headers(access_token)
                )
        except httpx.HTTPError as e:
            logger.error(f"Auth request failed: {e}")
            raise AuthError(str(e)) from e

        if response.status_code >= 400:
            message = None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("msg") or body.get("error_description") or body.get("message")
            raise AuthError(message or f"Auth request failed with HTTP {response.status_code}")

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise AuthError(f"Invalid response from auth server: {e}") from e

    def authorize_url(
        self,
        provider: str = "google",
        redirect_to: Optional[str] = None
    ) -> str:
        """
        URL that starts the OAuth sign-in in a browser.

        Args:
            provider: OAuth provider name
            redirect_to: Deep link the browser returns to

        Returns:
            Authorization URL
        """
        params = {"provider": provider}
        if redirect_to:
            params["redirect_to"] = redirect_to
        return str(httpx.URL(f"{self.auth_url}/authorize", params=params))

    def get_user(self, access_token: str) -> AuthUser:
        """Get the user an access token belongs to."""
        data = self._request("GET", "/user", access_token=access_token)
        if "id" not in data:
            raise AuthError("Session has no user")
        return AuthUser.from_dict(data)

    def set_session(self, tokens: TokenPair) -> AuthSession:
        """Adopt tokens from an OAuth redirect as the current session."""
        user = self.get_user(tokens.access_token)
        logger.info(f"Session started for user {user.id}")
        return AuthSession(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=user,
        )

    def refresh_session(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        data = self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token}
        )
        try:
            return AuthSession(
                access_token=data["access_token"],
                refresh_token=data["refresh_token"],
                user=AuthUser.from_dict(data["user"]),
            )
        except (KeyError, TypeError) as e:
            raise AuthError(f"Invalid session response: {e}") from e

    def sign_out(self, access_token: str) -> None:
        """Revoke the session."""
        self._request("POST", "/logout", access_token=access_token)
        logger.info("Signed out")


def get_auth_client(config: Optional[Settings] = None) -> SupabaseAuthClient:
    """Get auth client for the current configuration."""
    config = config or default_settings
    if not config.supabase_configured:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set for sign-in")
    return SupabaseAuthClient(
        url=config.supabase_url,
        api_key=config.supabase_key,
        timeout=config.store_timeout_seconds
    )
