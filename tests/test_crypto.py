from datetime import datetime
from uuid import UUID

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from pulseguard.common.crypto import (
    SignatureService,
    canonical_encoding,
    format_field,
    signed_values,
)
from pulseguard.common.exceptions import ConfigurationError


@pytest.fixture
def service() -> SignatureService:
    key = Ed25519PrivateKey.generate()
    return SignatureService(key.public_key(), key)


def test_sign_then_verify(service: SignatureService) -> None:
    fields = ["anonymous", "00000000-0000-0000-0000-000000000000"]
    signature = service.sign(fields)
    assert service.verify(signature, fields)


def test_sign_is_deterministic(service: SignatureService) -> None:
    assert service.sign(["a", "b"]) == service.sign(["a", "b"])


@pytest.mark.parametrize("index", [0, 1, 2])
def test_tampered_field_fails(service: SignatureService, index: int) -> None:
    fields = ["me@example.com", "3f2504e0-4f89-11d3-9a0c-0305e82c3301", "1.3.0"]
    signature = service.sign(fields)
    tampered = list(fields)
    tampered[index] += "x"
    assert not service.verify(signature, tampered)


def test_field_order_matters(service: SignatureService) -> None:
    signature = service.sign(["alpha", "beta"])
    assert not service.verify(signature, ["beta", "alpha"])


@pytest.mark.parametrize("signature", [None, "", "not-hex", "abcd", "zz" * 64])
def test_malformed_signature_is_untrusted(
    service: SignatureService, signature: str | None
) -> None:
    assert service.verify(signature, ["a"]) is False


def test_signature_from_other_key_fails(service: SignatureService) -> None:
    other = Ed25519PrivateKey.generate()
    forged = SignatureService(other.public_key(), other).sign(["a"])
    assert not service.verify(forged, ["a"])


def test_verify_only_service_cannot_sign() -> None:
    key = Ed25519PrivateKey.generate()
    service = SignatureService(key.public_key())
    with pytest.raises(ConfigurationError):
        service.sign(["a"])


def test_format_field_canonical_forms() -> None:
    assert format_field(UUID(int=0)) == "00000000-0000-0000-0000-000000000000"
    assert (
        format_field(UUID("3F2504E0-4F89-11D3-9A0C-0305E82C3301"))
        == "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
    )
    assert format_field(datetime(2024, 5, 1, 12, 0, 0)) == "2024-05-01T12:00:00.000000"
    assert format_field(True) == "true"
    assert format_field(7) == "7"


def test_signed_values_stop_at_signature() -> None:
    fields = [("email", "a"), ("licensekey", "b"), ("signature", "c"), ("extra", "d")]
    assert signed_values(fields) == ["a", "b"]
    assert canonical_encoding(["a", "b"]) == b"ab"
