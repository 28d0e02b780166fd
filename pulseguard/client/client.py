"""
Host-facing license and liveness client.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from pulseguard.client.application.handshake import HandshakeProtocol
from pulseguard.client.application.heartbeat import HeartbeatScheduler
from pulseguard.client.infrastructure.config_loader import ConfigLoader
from pulseguard.client.infrastructure.license_store import LicenseStore
from pulseguard.client.infrastructure.transport import RemoteCallTransport
from pulseguard.common.exceptions import StartupError
from pulseguard.common.models import ClientConfig

if TYPE_CHECKING:
    from pulseguard.client.domain.entities import HeartbeatState, SessionIdentity
    from pulseguard.common.interfaces import IHostRuntime
    from pulseguard.common.models import LicenseRecord


class SecurityClient:
    """Startup checks, per-frame liveness polling and shutdown notice.

    Construction blocks while the compatibility check, license validation and
    startup handshake run, and raises a StartupError subclass if any of them
    fails. Afterwards nothing here blocks the host: ``poll()`` is meant to be
    called once per frame and ``shutdown()`` once at teardown.
    """

    def __init__(
        self,
        host: IHostRuntime,
        config: ClientConfig | None = None,
        **overrides: Any,
    ):
        client_config = config or ClientConfig(**overrides)
        self.loader = ConfigLoader(client_config)
        self.logger = logging.getLogger(__name__)
        self.host = host

        signer = self.loader.build_signer()
        self.transport = RemoteCallTransport(
            signer,
            timeout=self.loader.request_timeout,
            content_type=self.loader.content_type,
        )
        self.license_store = LicenseStore(
            self.loader.license_file_path,
            self.transport,
            signer,
            self.loader.license_url,
            anonymous_email=self.loader.anonymous_email,
        )
        self.protocol = HandshakeProtocol(
            self.transport,
            self.license_store,
            runtime_version=host.runtime_version,
            client_version=self.loader.client_version,
            startup_url=self.loader.startup_url,
            keepalive_url=self.loader.keepalive_url,
            shutdown_url=self.loader.shutdown_url,
        )

        try:
            self.protocol.run_startup()
        except StartupError as e:
            self.logger.error("Startup check failed [%s]: %s", e.reason, e)
            raise

        self.scheduler = HeartbeatScheduler(
            self.protocol.heartbeat,
            host.is_in_open_space,
            interval=self.loader.pulse_interval,
        )
        self._shutdown_thread: threading.Thread | None = None

    @property
    def license(self) -> LicenseRecord:
        assert self.protocol.license is not None
        return self.protocol.license

    @property
    def session(self) -> SessionIdentity:
        assert self.protocol.session is not None
        return self.protocol.session

    @property
    def heartbeat_state(self) -> HeartbeatState:
        return self.scheduler.state

    def poll(self) -> bool:
        """Return False when the host must stop; may launch a heartbeat."""
        return self.scheduler.poll()

    def shutdown(self) -> None:
        """Notify the authority without waiting for the answer.

        The call runs on a daemon thread whose result is never looked at. If
        the process exits first, the notice may not be delivered.
        """
        if self._shutdown_thread is not None:
            return
        self.scheduler.stop()
        self._shutdown_thread = threading.Thread(
            target=self.protocol.shutdown, name="pulseguard-shutdown", daemon=True
        )
        self._shutdown_thread.start()
        self.logger.info("Shutdown notice submitted")

    def __enter__(self) -> SecurityClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown()
