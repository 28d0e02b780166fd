# pulseguard: license verification and liveness heartbeats

from pulseguard.client.client import SecurityClient
from pulseguard.common.config import CLIENT_VERSION
from pulseguard.common.decorators import liveness_protected, requires_liveness
from pulseguard.common.exceptions import (
    InvalidLicenseError,
    ObsoleteVersionError,
    StartupError,
    VerificationUnavailableError,
)

__version__ = CLIENT_VERSION

__all__ = [
    "InvalidLicenseError",
    "ObsoleteVersionError",
    "SecurityClient",
    "StartupError",
    "VerificationUnavailableError",
    "liveness_protected",
    "requires_liveness",
]
