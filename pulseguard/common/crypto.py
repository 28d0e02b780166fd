"""Signing and verification of ordered field sequences.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from cryptography.exceptions import InvalidSignature

from pulseguard.common.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cryptography.hazmat.primitives.asymmetric.ed25519 import (
        Ed25519PrivateKey,
        Ed25519PublicKey,
    )

logger = logging.getLogger(__name__)

SIGNATURE_FIELD = "signature"
ED25519_SIGNATURE_LEN = 64


def format_field(value: object) -> str:
    """Render a field value in its single canonical text form."""
    if isinstance(value, str):
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def canonical_encoding(fields: Iterable[str]) -> bytes:
    """Bytes covered by a signature: the field texts concatenated in order."""
    return "".join(fields).encode("utf-8")


def signed_values(fields: Iterable[tuple[str, str]]) -> list[str]:
    """Values of the fields preceding the first ``signature`` field."""
    values: list[str] = []
    for name, value in fields:
        if name == SIGNATURE_FIELD:
            break
        values.append(value)
    return values


class SignatureService:
    """Ed25519 signatures over ordered field sequences.

    Requests are signed with the client key; everything coming back from the
    authority (responses, license records) is verified against the trusted
    authority public key.
    """

    def __init__(
        self,
        authority_pub: Ed25519PublicKey,
        client_priv: Ed25519PrivateKey | None = None,
    ) -> None:
        self.authority_pub = authority_pub
        self.client_priv = client_priv

    def sign(self, fields: Sequence[str]) -> str:
        """Sign the fields in the given order and return a hex signature."""
        if self.client_priv is None:
            msg = "No client signing key configured"
            raise ConfigurationError(msg)
        return self.client_priv.sign(canonical_encoding(fields)).hex()

    def verify(self, signature: str | None, fields: Sequence[str]) -> bool:
        """Check ``signature`` against the fields. Never raises."""
        if not signature:
            return False
        try:
            raw = bytes.fromhex(signature)
        except (TypeError, ValueError):
            logger.debug("Signature is not valid hex")
            return False
        if len(raw) != ED25519_SIGNATURE_LEN:
            logger.debug("Signature has wrong length: %d", len(raw))
            return False
        try:
            self.authority_pub.verify(raw, canonical_encoding(fields))
        except InvalidSignature:
            return False
        return True
