"""
Application layer: startup, heartbeat and shutdown calls to the authority.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError as PydanticValidationError

from pulseguard.client.domain.entities import HandshakeState, SessionIdentity
from pulseguard.common.exceptions import (
    InvalidLicenseError,
    ObsoleteVersionError,
    SecurityError,
    VerificationUnavailableError,
)
from pulseguard.common.models import StartupResponse

if TYPE_CHECKING:
    from pulseguard.client.infrastructure.license_store import LicenseStore
    from pulseguard.client.infrastructure.transport import RemoteCallTransport
    from pulseguard.common.models import LicenseRecord

logger = logging.getLogger(__name__)

OBSOLETE_CLIENT = (
    "Your client version is obsolete, please download a new version "
    "from the authority"
)
VERIFY_ERROR = "Unable to verify your support license, please try again later"


class HandshakeProtocol:
    """Linear lifecycle: compatibility, license, startup, then heartbeats.

    Every startup step is fatal on failure and nothing is retried. Heartbeat
    and shutdown calls never raise.
    """

    def __init__(
        self,
        transport: RemoteCallTransport,
        license_store: LicenseStore,
        runtime_version: Callable[[], int],
        client_version: str,
        startup_url: str,
        keepalive_url: str,
        shutdown_url: str,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.transport = transport
        self.license_store = license_store
        self.runtime_version = runtime_version
        self.client_version = client_version
        self.startup_url = startup_url
        self.keepalive_url = keepalive_url
        self.shutdown_url = shutdown_url
        self.now = now

        self.state = HandshakeState.INITIAL
        self.license: LicenseRecord | None = None
        self.session: SessionIdentity | None = None

    def run_startup(self) -> SessionIdentity:
        """Run the three startup checks in order."""
        self.check_compatibility()
        self.validate_license()
        return self.startup()

    def check_compatibility(self) -> None:
        """Compare the host runtime version with our minor build version."""
        client_minor = int(self.client_version.split(".")[1])
        try:
            host_version = int(self.runtime_version())
        except Exception as e:
            msg = f"{OBSOLETE_CLIENT} (host version unavailable: {e})"
            raise ObsoleteVersionError(msg) from e
        if host_version != client_minor:
            msg = (
                f"{OBSOLETE_CLIENT} (host runtime reports {host_version}, "
                f"client {self.client_version} expects {client_minor})"
            )
            raise ObsoleteVersionError(msg)
        self.state = HandshakeState.COMPATIBLE

    def validate_license(self) -> LicenseRecord:
        """Load the license through the store."""
        self._require(HandshakeState.COMPATIBLE)
        try:
            self.license = self.license_store.load()
        except InvalidLicenseError:
            raise
        except (SecurityError, OSError) as e:
            raise InvalidLicenseError(str(e)) from e
        self.state = HandshakeState.LICENSED
        return self.license

    def startup(self) -> SessionIdentity:
        """Announce this instance and obtain its instance id."""
        self._require(HandshakeState.LICENSED)
        assert self.license is not None

        response = self.transport.call(
            self.startup_url,
            [
                ("email", self.license.email),
                ("licensekey", self.license.license_key),
                ("version", self.client_version),
                ("challenge", self.now()),
            ],
        )
        if response is None:
            raise VerificationUnavailableError(f"{VERIFY_ERROR} (startup not verified)")
        try:
            parsed = StartupResponse.model_validate(response)
        except PydanticValidationError as e:
            msg = f"{VERIFY_ERROR} (startup response without instance id)"
            raise VerificationUnavailableError(msg) from e

        self.session = SessionIdentity(
            email=self.license.email,
            license_key=self.license.license_key,
            instance_id=parsed.instanceid,
        )
        self.state = HandshakeState.ACTIVE
        logger.info("Startup verified, instance %s", parsed.instanceid)
        return self.session

    def heartbeat(self) -> bool:
        """Pulse the authority. Returns whether a verified answer came back."""
        if self.state is not HandshakeState.ACTIVE or self.session is None:
            return False
        result = self.transport.call(self.keepalive_url, self._identity_fields())
        if result is None:
            logger.warning("Heartbeat for instance %s failed", self.session.instance_id)
            return False
        logger.debug("Heartbeat OK")
        return True

    def shutdown(self) -> None:
        """Tell the authority this instance is closing. Outcome is discarded."""
        if self.state is not HandshakeState.ACTIVE or self.session is None:
            return
        self.state = HandshakeState.SHUT_DOWN
        self.transport.call(self.shutdown_url, self._identity_fields())

    def _identity_fields(self) -> list[tuple[str, object]]:
        assert self.session is not None
        return [
            ("email", self.session.email),
            ("licensekey", self.session.license_key),
            ("instanceid", self.session.instance_id),
            ("challenge", self.now()),
        ]

    def _require(self, expected: HandshakeState) -> None:
        if self.state is not expected:
            msg = f"Handshake step out of order: in {self.state.value}, need {expected.value}"
            raise RuntimeError(msg)
