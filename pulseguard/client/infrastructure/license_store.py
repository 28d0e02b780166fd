"""Infrastructure layer: the persisted license file.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from pulseguard.client.infrastructure.transport import build_document, parse_document
from pulseguard.common.crypto import signed_values
from pulseguard.common.exceptions import InvalidLicenseError
from pulseguard.common.models import NIL_UUID, LicenseRecord

if TYPE_CHECKING:
    from pulseguard.client.infrastructure.transport import RemoteCallTransport
    from pulseguard.common.crypto import SignatureService

logger = logging.getLogger(__name__)

LICENSE_ROOT = "license"
INVALID_LICENSE = (
    "Invalid support license, please download a new support license "
    "from the authority"
)


class LicenseStore:
    """Loads the license file, bootstrapping an anonymous one when absent."""

    def __init__(
        self,
        path: Path | str,
        transport: RemoteCallTransport,
        signer: SignatureService,
        license_url: str,
        anonymous_email: str = "anonymous",
    ) -> None:
        self.path = Path(path)
        self.transport = transport
        self.signer = signer
        self.license_url = license_url
        self.anonymous_email = anonymous_email

    def load(self) -> LicenseRecord:
        """Read and verify the license, acquiring an anonymous one first if needed."""
        if not self.path.exists():
            logger.info("No license at %s, requesting an anonymous one", self.path)
            self.save(self.acquire_anonymous())

        try:
            _, _, fields = parse_document(self.path.read_bytes())
        except (OSError, ET.ParseError) as e:
            msg = f"{INVALID_LICENSE} (unreadable license file {self.path}: {e})"
            raise InvalidLicenseError(msg) from e

        record = self._record_from_fields(fields)
        if not self.signer.verify(record.signature, signed_values(record.signed_fields())):
            msg = f"{INVALID_LICENSE} (signature check failed)"
            raise InvalidLicenseError(msg)

        logger.info("License loaded for %s", record.email)
        return record

    def acquire_anonymous(self) -> LicenseRecord:
        """Ask the authority for a license bound to no identity."""
        response = self.transport.call(
            self.license_url,
            [("email", self.anonymous_email), ("licensekey", NIL_UUID)],
        )
        if response is None:
            msg = f"{INVALID_LICENSE} (anonymous license request was not answered)"
            raise InvalidLicenseError(msg)
        return self._record_from_fields(list(response.items()))

    def save(self, record: LicenseRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(build_document(LICENSE_ROOT, record.signed_fields()))
        logger.info("License written to %s", self.path)

    @staticmethod
    def _record_from_fields(fields: list[tuple[str, str]]) -> LicenseRecord:
        try:
            return LicenseRecord.model_validate(dict(fields))
        except PydanticValidationError as e:
            msg = f"{INVALID_LICENSE} (missing or malformed fields)"
            raise InvalidLicenseError(msg) from e
