"""
OAuth credential management for drive-storage.

Builds a single authenticated Session from the configured refresh token.
No network traffic happens here until the first real API call, when
google-auth exchanges the refresh token for an access token.
"""

import asyncio
import logging
import threading
from typing import Optional
from urllib.parse import urlparse

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from ..config import DriveSettings
from ..constants import AUTH_URI
from ..errors import ConfigError, NotConfigured

logger = logging.getLogger(__name__)


class Session:
    """
    Authenticated handle for Drive API calls.

    Owned by CredentialManager; other components hold a reference. The only
    state that changes after construction is the short-lived access token,
    which google-auth refreshes on demand.
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials
        self._refresh_lock = threading.Lock()

    def _ensure_valid(self):
        """Refresh the access token if missing or expired (blocking)."""
        with self._refresh_lock:
            if not self.credentials.valid:
                logger.debug("Refreshing Drive access token")
                self.credentials.refresh(Request())

    async def authorization_header(self) -> dict:
        """
        Get the bearer header for a request, refreshing the token if needed.

        Raises:
            google.auth.exceptions.RefreshError: refresh token rejected
            google.auth.exceptions.TransportError: token endpoint unreachable
        """
        if not self.credentials.valid:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._ensure_valid)
        return {"Authorization": f"Bearer {self.credentials.token}"}


def validate_settings(settings: DriveSettings):
    """
    Check that enabled settings can produce a session.

    Raises:
        ConfigError: a required field is missing or malformed
    """
    missing = settings.missing_fields()
    if missing:
        raise ConfigError(
            f"Google Drive credentials missing: {', '.join(missing)}",
            fields=tuple(missing),
        )

    malformed = []
    if any(ch.isspace() for ch in settings.client_id.strip()):
        malformed.append("client_id")
    parsed = urlparse(settings.redirect_uri.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        malformed.append("redirect_uri")
    if malformed:
        raise ConfigError(
            f"Google Drive credentials malformed: {', '.join(malformed)}",
            fields=tuple(malformed),
        )


class CredentialManager:
    """
    Builds and holds the Drive Session.

    initialize() is safe to call from several threads; exactly one Session
    is constructed and later calls reuse it.
    """

    def __init__(self, settings: DriveSettings):
        self.settings = settings
        self._session: Optional[Session] = None
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        """True once a Session exists."""
        return self._session is not None

    @property
    def session(self) -> Session:
        return self.require_session()

    def require_session(self) -> Session:
        """
        Get the Session or fail before any network activity.

        Raises:
            NotConfigured: Drive is disabled or initialize() hasn't succeeded
        """
        session = self._session
        if session is None:
            if not self.settings.enabled:
                raise NotConfigured("Google Drive integration is disabled")
            raise NotConfigured("Google Drive client is not initialized")
        return session

    def initialize(self) -> bool:
        """
        Build the Session from settings.

        Returns:
            True if a Session is ready, False if Drive is disabled

        Raises:
            ConfigError: credentials missing or session construction failed
        """
        if self._session is not None:
            return True

        with self._lock:
            if self._session is not None:
                return True

            if not self.settings.enabled:
                logger.info("Google Drive integration disabled")
                return False

            validate_settings(self.settings)

            try:
                credentials = Credentials(
                    token=None,
                    refresh_token=self.settings.refresh_token.strip(),
                    token_uri=self.settings.token_uri,
                    client_id=self.settings.client_id.strip(),
                    client_secret=self.settings.client_secret.strip(),
                    scopes=list(self.settings.scopes),
                )
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Could not build Google credentials: {e}", cause=e) from e

            self._session = Session(credentials)
            logger.info("Google Drive client initialized")
            return True


def authorize_user(settings: DriveSettings, port: int = 0) -> str:
    """
    Run the interactive consent flow and return a refresh token.

    Opens a browser for the account owner. The returned token goes into
    GOOGLE_REFRESH_TOKEN.

    Args:
        settings: Settings holding the OAuth client ID and secret
        port: Local port for the redirect listener (0 picks a free one)

    Returns:
        Refresh token string

    Raises:
        ConfigError: client credentials missing, or Google returned no refresh token
    """
    missing = [name for name in ("client_id", "client_secret") if not getattr(settings, name).strip()]
    if missing:
        raise ConfigError(
            f"Google Drive credentials missing: {', '.join(missing)}",
            fields=tuple(missing),
        )

    # Same shape as a downloaded credentials.json
    client_config = {
        "installed": {
            "client_id": settings.client_id.strip(),
            "client_secret": settings.client_secret.strip(),
            "auth_uri": AUTH_URI,
            "token_uri": settings.token_uri,
            "redirect_uris": ["http://localhost"],
        }
    }

    flow = InstalledAppFlow.from_client_config(client_config, list(settings.scopes))
    creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")

    if not creds or not creds.refresh_token:
        raise ConfigError("Google did not return a refresh token", fields=("refresh_token",))
    return creds.refresh_token
