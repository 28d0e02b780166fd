"""Domain layer: session identity and heartbeat state.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class HandshakeState(enum.Enum):
    INITIAL = "initial"
    COMPATIBLE = "compatible"
    LICENSED = "licensed"
    ACTIVE = "active"
    SHUT_DOWN = "shut_down"


@dataclass(frozen=True)
class SessionIdentity:
    """Identity sent on every call after the startup handshake."""

    email: str
    license_key: UUID
    instance_id: UUID


@dataclass(frozen=True)
class HeartbeatState:
    """Snapshot of the heartbeat. Replaced as a whole, never mutated."""

    last_attempt: float
    last_succeeded: bool = True
    in_flight: bool = False

    @property
    def failed(self) -> bool:
        return not self.last_succeeded
