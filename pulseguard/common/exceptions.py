"""
Custom exceptions for the license and liveness subsystem.
"""

from __future__ import annotations


class SecurityError(Exception):
    """Base exception for license and authority failures."""

    reason: str = "security"

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class ConfigurationError(SecurityError):
    """Exception for missing keys or unusable settings."""

    reason = "configuration"


class StartupError(SecurityError):
    """Fatal failure during construction. The host must not proceed."""


class ObsoleteVersionError(StartupError):
    """Client build does not match the host runtime version."""

    reason = "obsolete"


class InvalidLicenseError(StartupError):
    """License file is missing, malformed or carries a bad signature."""

    reason = "invalid_license"


class VerificationUnavailableError(StartupError):
    """Startup handshake produced no verified answer."""

    reason = "verification_unavailable"


class AuthorityRejectedError(SecurityError):
    """The authority answered with an error document."""

    reason = "rejected"


class LivenessError(SecurityError):
    """Raised by the liveness decorators when execution must halt."""

    reason = "halted"
