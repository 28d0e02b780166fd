"""
Configuration settings for the license and liveness subsystem.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pulseguard.common.logging_utils import resolve_level

# Build version of this client. The minor component must match the host
# runtime's version indicator.
CLIENT_VERSION = "1.3.0"

LICENSE_PATH = "/Subscription/GenerateLicense"
STARTUP_PATH = "/Client/Startup"
KEEPALIVE_PATH = "/Client/KeepAlive"
SHUTDOWN_PATH = "/Client/Shutdown"


class Config:
    """Central configuration class for all client settings."""

    def __init__(self) -> None:
        # Heartbeat settings
        self.PULSE_INTERVAL: float = float(
            os.getenv("PULSEGUARD_PULSE_INTERVAL", "60")
        )  # Seconds between heartbeat launches
        self.REQUEST_TIMEOUT: float = float(
            os.getenv("PULSEGUARD_REQUEST_TIMEOUT", "10")
        )  # Per-call network timeout in seconds

        # Authority endpoints
        self.AUTHORITY_URL: str = os.getenv(
            "PULSEGUARD_AUTHORITY_URL", "http://127.0.0.1:8000"
        ).rstrip("/")
        self.LICENSE_URL: str = self.AUTHORITY_URL + LICENSE_PATH
        self.STARTUP_URL: str = self.AUTHORITY_URL + STARTUP_PATH
        self.KEEPALIVE_URL: str = self.AUTHORITY_URL + KEEPALIVE_PATH
        self.SHUTDOWN_URL: str = self.AUTHORITY_URL + SHUTDOWN_PATH

        # File paths
        self.BASE_DIR: Path = Path(__file__).parent.parent
        self.KEYS_DIR: Path = Path(
            os.getenv("PULSEGUARD_KEYS_DIR", str(self.BASE_DIR / "keys"))
        )
        self.AUTHORITY_PUBLIC_KEY_PATH: Path = self.KEYS_DIR / "authority_public.key"
        self.CLIENT_PRIVATE_KEY_PATH: Path = self.KEYS_DIR / "client_private.key"
        self.LICENSE_FILE_PATH: Path = Path(
            os.getenv("PULSEGUARD_LICENSE_FILE", str(self.BASE_DIR / "pulseguard.lic"))
        )

        # Protocol constants
        self.CLIENT_VERSION: str = CLIENT_VERSION
        self.ANONYMOUS_EMAIL: str = "anonymous"
        self.CONTENT_TYPE: str = "text/xml"

        # Logging
        self.LOG_LEVEL: int = resolve_level(
            os.getenv("PULSEGUARD_LOG_LEVEL", str(logging.INFO))
        )

    @property
    def client_minor_version(self) -> int:
        """Minor component of the client build version."""
        return int(self.CLIENT_VERSION.split(".")[1])
