"""Infrastructure layer: Configuration resolution and key loading.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, cast

from cryptography.hazmat.primitives import serialization

from pulseguard.common import SignatureService, setup_logger
from pulseguard.common.config import (
    KEEPALIVE_PATH,
    LICENSE_PATH,
    SHUTDOWN_PATH,
    STARTUP_PATH,
    Config,
)
from pulseguard.common.exceptions import ConfigurationError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.ed25519 import (
        Ed25519PrivateKey,
        Ed25519PublicKey,
    )

    from pulseguard.common.models import ClientConfig


class ConfigLoader:
    """Resolves per-client overrides against Config and loads PEM keys."""

    def __init__(self, client_config: ClientConfig):
        self.config: Config = Config()

        if client_config.authority_url:
            base = client_config.authority_url.rstrip("/")
            self.license_url = base + LICENSE_PATH
            self.startup_url = base + STARTUP_PATH
            self.keepalive_url = base + KEEPALIVE_PATH
            self.shutdown_url = base + SHUTDOWN_PATH
        else:
            self.license_url = self.config.LICENSE_URL
            self.startup_url = self.config.STARTUP_URL
            self.keepalive_url = self.config.KEEPALIVE_URL
            self.shutdown_url = self.config.SHUTDOWN_URL

        keys_dir = client_config.keys_dir
        self.authority_public_key_path: Path = (
            client_config.authority_public_key_path
            or (keys_dir / "authority_public.key" if keys_dir else None)
            or self.config.AUTHORITY_PUBLIC_KEY_PATH
        )
        self.client_private_key_path: Path = (
            client_config.client_private_key_path
            or (keys_dir / "client_private.key" if keys_dir else None)
            or self.config.CLIENT_PRIVATE_KEY_PATH
        )
        self.license_file_path: Path = (
            client_config.license_file_path or self.config.LICENSE_FILE_PATH
        )

        self.pulse_interval: float = (
            client_config.pulse_interval
            if client_config.pulse_interval is not None
            else self.config.PULSE_INTERVAL
        )
        self.request_timeout: float = (
            client_config.request_timeout
            if client_config.request_timeout is not None
            else self.config.REQUEST_TIMEOUT
        )
        self.log_level: int = (
            client_config.log_level
            if client_config.log_level is not None
            else self.config.LOG_LEVEL
        )
        self.client_version: str = self.config.CLIENT_VERSION
        self.client_minor_version: int = self.config.client_minor_version
        self.anonymous_email: str = self.config.ANONYMOUS_EMAIL
        self.content_type: str = self.config.CONTENT_TYPE

        # Setup logging
        self.logger = logging.getLogger("pulseguard")
        setup_logger(self.logger, self.log_level)

    def load_authority_public_key(self) -> Ed25519PublicKey:
        """Load the trusted authority public key from file."""
        key_path = self.authority_public_key_path
        if not key_path.exists():
            msg = f"Authority public key file not found: {key_path}"
            raise ConfigurationError(msg)
        with key_path.open("rb") as key_f:
            try:
                return cast(
                    "Ed25519PublicKey", serialization.load_pem_public_key(key_f.read())
                )
            except ValueError as e:
                msg = f"Invalid authority public key in {key_path}: {e}"
                raise ConfigurationError(msg) from e

    def load_client_private_key(self) -> Ed25519PrivateKey:
        """Load the client signing key from file."""
        key_path = self.client_private_key_path
        if not key_path.exists():
            msg = (
                f"Client private key file not found: {key_path}. "
                "Run 'pulseguard keygen' to generate it."
            )
            raise ConfigurationError(msg)
        with key_path.open("rb") as key_f:
            try:
                return cast(
                    "Ed25519PrivateKey",
                    serialization.load_pem_private_key(key_f.read(), None),
                )
            except ValueError as e:
                msg = f"Invalid client private key in {key_path}: {e}"
                raise ConfigurationError(msg) from e

    def build_signer(self) -> SignatureService:
        return SignatureService(
            self.load_authority_public_key(), self.load_client_private_key()
        )
