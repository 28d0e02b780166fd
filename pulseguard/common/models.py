"""
Pydantic models for license records and client configuration.
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

NIL_UUID = UUID(int=0)


class LicenseRecord(BaseModel):
    """Signed license document, immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str = Field(min_length=1)
    license_key: UUID = Field(alias="licensekey")
    signature: str = Field(min_length=1)

    def signed_fields(self) -> list[tuple[str, str]]:
        """Fields in wire order, signature last."""
        return [
            ("email", self.email),
            ("licensekey", str(self.license_key)),
            ("signature", self.signature),
        ]


class StartupResponse(BaseModel):
    instanceid: UUID
    signature: str


class ClientConfig(BaseModel):
    authority_url: str | None = None
    license_file_path: Path | None = None
    keys_dir: Path | None = None
    authority_public_key_path: Path | None = None
    client_private_key_path: Path | None = None
    pulse_interval: float | None = Field(default=None, gt=0)
    request_timeout: float | None = Field(default=None, gt=0)
    log_level: int | None = None
