"""
Key generator for the Ed25519 key pairs used to sign and verify messages.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from pulseguard.common.config import Config

logger = logging.getLogger(__name__)


class KeyGenerator:
    """Writes a PEM key pair named ``<prefix>_private.key``/``<prefix>_public.key``."""

    def __init__(self, keys_dir: Path | None = None, prefix: str = "client"):
        self.keys_dir = keys_dir or Config().KEYS_DIR
        self.prefix = prefix

    @property
    def private_path(self) -> Path:
        return self.keys_dir / f"{self.prefix}_private.key"

    @property
    def public_path(self) -> Path:
        return self.keys_dir / f"{self.prefix}_public.key"

    def generate_keys(self) -> tuple[Path, Path]:
        """Generate and save the key pair. Returns (private, public) paths."""
        logger.info("Generating Ed25519 %s keys...", self.prefix)

        private_key = Ed25519PrivateKey.generate()
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_pem = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

        self.keys_dir.mkdir(parents=True, exist_ok=True)
        self.private_path.write_bytes(private_pem)
        self.public_path.write_bytes(public_pem)

        logger.info("Private: %s", self.private_path)
        logger.info("Public: %s", self.public_path)
        return self.private_path, self.public_path
