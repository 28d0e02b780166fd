"""Infrastructure layer: signed XML request/response exchange with the authority.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

import requests

from pulseguard.common.crypto import SIGNATURE_FIELD, format_field, signed_values
from pulseguard.common.exceptions import AuthorityRejectedError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pulseguard.common.crypto import SignatureService

logger = logging.getLogger(__name__)

REQUEST_ROOT = "request"
ERROR_ROOT = "error"


def build_document(root: str, fields: Sequence[tuple[str, str]]) -> bytes:
    """Serialize ordered fields as ``<root><name>value</name>...</root>``."""
    element = ET.Element(root)
    for name, value in fields:
        ET.SubElement(element, name).text = value
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)


def parse_document(body: bytes | str) -> tuple[str, str, list[tuple[str, str]]]:
    """Parse a flat XML document into root tag, root text and ordered fields."""
    element = ET.fromstring(body)
    fields = [(child.tag, (child.text or "").strip()) for child in element]
    return element.tag, (element.text or "").strip(), fields


class RemoteCallTransport:
    """Performs one signed exchange per call. Failures collapse to None."""

    def __init__(
        self,
        signer: SignatureService,
        timeout: float = 10.0,
        content_type: str = "text/xml",
    ) -> None:
        self.signer = signer
        self.timeout = timeout
        self.content_type = content_type

    def sign_fields(
        self, fields: Sequence[tuple[str, object]]
    ) -> list[tuple[str, str]]:
        """Render values canonically and append a signature if none is present."""
        rendered = [(name, format_field(value)) for name, value in fields]
        if any(name == SIGNATURE_FIELD for name, _ in rendered):
            return rendered
        signature = self.signer.sign(signed_values(rendered))
        rendered.append((SIGNATURE_FIELD, signature))
        return rendered

    def call(
        self, url: str, fields: Sequence[tuple[str, object]]
    ) -> dict[str, str] | None:
        """POST the signed fields to ``url`` and return the verified response.

        Returns the response fields in order (signature included), or None
        when the network failed, the body was malformed, the authority
        answered with an error, or the response signature did not verify.
        """
        try:
            body = build_document(REQUEST_ROOT, self.sign_fields(fields))
            r = requests.post(
                url,
                data=body,
                headers={"Content-Type": self.content_type},
                timeout=self.timeout,
            )
            r.raise_for_status()
            return self._verified(url, r.content)
        except AuthorityRejectedError as e:
            logger.warning("Authority rejected call to %s: %s", url, e)
        except requests.RequestException as e:
            logger.warning("Network failure calling %s: %s", url, e)
        except Exception:
            logger.warning("Call to %s failed", url, exc_info=True)
        return None

    def _verified(self, url: str, content: bytes) -> dict[str, str] | None:
        root, text, fields = parse_document(content)
        if root == ERROR_ROOT:
            raise AuthorityRejectedError(text or "unspecified error")

        response = dict(fields)
        signature = response.get(SIGNATURE_FIELD)
        if not signature:
            logger.warning("Unsigned response from %s", url)
            return None
        if not self.signer.verify(signature, signed_values(fields)):
            logger.warning("Response signature from %s did not verify", url)
            return None
        return response
