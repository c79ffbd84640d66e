"""
Configuration for drive-storage.

Settings come from the process environment and are resolved once at
startup; changing them requires a restart.

Environment:
- GOOGLE_DRIVE_ENABLED: "true"/"1"/"yes"/"on" to enable (anything else disables)
- GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URI: OAuth client
- GOOGLE_REFRESH_TOKEN: long-lived delegated credential
- GOOGLE_TOKEN_URI: optional token endpoint override
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .constants import (
    DRIVE_SCOPES,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    ENV_ENABLED,
    ENV_REDIRECT_URI,
    ENV_REFRESH_TOKEN,
    ENV_TOKEN_URI,
    TOKEN_URI,
)

TRUTHY = {"true", "1", "yes", "on"}

# Credential fields that must all be set when enabled
REQUIRED_FIELDS = ("client_id", "client_secret", "redirect_uri", "refresh_token")


def parse_enabled(value: Optional[str]) -> bool:
    """Interpret a boolean-like environment value. Absent means disabled."""
    if value is None:
        return False
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class DriveSettings:
    """Process-wide Drive settings."""
    enabled: bool = False
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    refresh_token: str = ""
    token_uri: str = TOKEN_URI
    scopes: tuple = field(default=DRIVE_SCOPES)

    def missing_fields(self) -> list[str]:
        """Names of required credential fields that are absent or blank."""
        return [name for name in REQUIRED_FIELDS if not (getattr(self, name) or "").strip()]

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "refresh_token": self.refresh_token,
            "token_uri": self.token_uri,
            "scopes": list(self.scopes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DriveSettings":
        enabled = data.get("enabled", False)
        if isinstance(enabled, str):
            enabled = parse_enabled(enabled)
        return cls(
            enabled=bool(enabled),
            client_id=data.get("client_id", ""),
            client_secret=data.get("client_secret", ""),
            redirect_uri=data.get("redirect_uri", ""),
            refresh_token=data.get("refresh_token", ""),
            token_uri=data.get("token_uri") or TOKEN_URI,
            scopes=tuple(data.get("scopes") or DRIVE_SCOPES),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DriveSettings":
        """
        Read settings from the environment.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Returns:
            DriveSettings snapshot
        """
        env = os.environ if environ is None else environ
        return cls(
            enabled=parse_enabled(env.get(ENV_ENABLED)),
            client_id=env.get(ENV_CLIENT_ID, ""),
            client_secret=env.get(ENV_CLIENT_SECRET, ""),
            redirect_uri=env.get(ENV_REDIRECT_URI, ""),
            refresh_token=env.get(ENV_REFRESH_TOKEN, ""),
            token_uri=env.get(ENV_TOKEN_URI) or TOKEN_URI,
        )

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"DriveSettings(enabled={self.enabled!r}, client_id={self.client_id!r}, "
            f"redirect_uri={self.redirect_uri!r}, token_uri={self.token_uri!r})"
        )
