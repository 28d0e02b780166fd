from __future__ import annotations

import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from pulseguard.client.infrastructure.transport import build_document
from pulseguard.common.crypto import SignatureService, signed_values

AUTHORITY_URL = "http://authority.test"


class MockResponse:
    def __init__(self, status_code: int, content: bytes):
        self.status_code = status_code
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


@dataclass
class FakeHost:
    version: int = 3
    in_open_space: bool = False

    def runtime_version(self) -> int:
        return self.version

    def is_in_open_space(self) -> bool:
        return self.in_open_space


@dataclass
class FakeAuthority:
    """Signs answers with the authority key, checks requests with the client key."""

    service: SignatureService
    instance_id: uuid.UUID = field(default_factory=uuid.uuid4)
    license_key: uuid.UUID = field(default_factory=uuid.uuid4)
    license_email: str = "anonymous"
    omit_instanceid: bool = False
    reject_keepalive: bool = False
    calls: list[tuple[str, list[tuple[str, str]]]] = field(default_factory=list)

    def signed(self, fields: list[tuple[str, str]], root: str = "response") -> bytes:
        signature = self.service.sign(signed_values(fields))
        return build_document(root, [*fields, ("signature", signature)])

    def app(self) -> FastAPI:
        app = FastAPI()

        async def read(request: Request) -> list[tuple[str, str]]:
            element = ET.fromstring(await request.body())
            fields = [(child.tag, child.text or "") for child in element]
            self.calls.append((request.url.path, fields))
            return fields

        def error(message: str) -> Response:
            element = ET.Element("error")
            element.text = message
            return Response(content=ET.tostring(element), media_type="text/xml")

        def valid(fields: list[tuple[str, str]]) -> bool:
            return self.service.verify(dict(fields).get("signature"), signed_values(fields))

        @app.post("/Subscription/GenerateLicense")
        async def generate_license(request: Request) -> Response:
            fields = await read(request)
            if not valid(fields):
                return error("bad request signature")
            body = self.signed(
                [("email", self.license_email), ("licensekey", str(self.license_key))],
                root="license",
            )
            return Response(content=body, media_type="text/xml")

        @app.post("/Client/Startup")
        async def startup(request: Request) -> Response:
            fields = await read(request)
            if not valid(fields):
                return error("bad request signature")
            answer = [("challenge", dict(fields)["challenge"])]
            if not self.omit_instanceid:
                answer.append(("instanceid", str(self.instance_id)))
            return Response(content=self.signed(answer), media_type="text/xml")

        @app.post("/Client/KeepAlive")
        async def keepalive(request: Request) -> Response:
            fields = await read(request)
            if self.reject_keepalive or not valid(fields):
                return error("instance unknown")
            answer = [("challenge", dict(fields)["challenge"])]
            return Response(content=self.signed(answer), media_type="text/xml")

        @app.post("/Client/Shutdown")
        async def shutdown(request: Request) -> Response:
            await read(request)
            return Response(content=self.signed([("ok", "true")]), media_type="text/xml")

        return app

    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]


def _write_pair(keys_dir: Path, prefix: str) -> Ed25519PrivateKey:
    private_key = Ed25519PrivateKey.generate()
    (keys_dir / f"{prefix}_private.key").write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    (keys_dir / f"{prefix}_public.key").write_bytes(
        private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    )
    return private_key


@pytest.fixture
def keys_dir(tmp_path: Path) -> Path:
    """Client and authority key pairs on disk."""
    path = tmp_path / "keys"
    path.mkdir()
    return path


@pytest.fixture
def authority_key(keys_dir: Path) -> Ed25519PrivateKey:
    return _write_pair(keys_dir, "authority")


@pytest.fixture
def client_key(keys_dir: Path) -> Ed25519PrivateKey:
    return _write_pair(keys_dir, "client")


@pytest.fixture
def client_signer(
    authority_key: Ed25519PrivateKey, client_key: Ed25519PrivateKey
) -> SignatureService:
    """What the client uses: signs with its key, trusts the authority key."""
    return SignatureService(authority_key.public_key(), client_key)


@pytest.fixture
def authority(
    authority_key: Ed25519PrivateKey, client_key: Ed25519PrivateKey
) -> FakeAuthority:
    return FakeAuthority(SignatureService(client_key.public_key(), authority_key))


@pytest.fixture
def routed_authority(authority: FakeAuthority, monkeypatch: Any) -> FakeAuthority:
    """Route requests.post to the fake authority app."""
    test_client = TestClient(authority.app())

    def mock_post(url: str, **kwargs: Any) -> MockResponse:
        path = url.replace(AUTHORITY_URL, "")
        response = test_client.post(
            path, content=kwargs.get("data"), headers=kwargs.get("headers")
        )
        return MockResponse(response.status_code, response.content)

    monkeypatch.setattr("requests.post", mock_post)
    return authority


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def make_response() -> type[MockResponse]:
    return MockResponse
