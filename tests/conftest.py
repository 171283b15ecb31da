"""Shared pytest fixtures for the HTTP event source tests."""

import socket
import time
from typing import Any

import jwt
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from http_event_source import CanonicalEvent, HttpEventSource, StatusResult

SECRET = "test-secret-that-is-long-enough-for-hs256"
AUDIENCE = "orders-api"
ISSUER = "https://issuer.example.com"


class RecordingProcessor:
    """Processor double that records every call and returns a fixed status."""

    def __init__(self, result: StatusResult | dict[str, Any] | None = None):
        self.result = result if result is not None else StatusResult(code=200, data="ok")
        self.calls: list[tuple[CanonicalEvent, dict[str, Any]]] = []

    async def __call__(self, event: CanonicalEvent, context: dict[str, Any]):
        self.calls.append((event, context))
        return self.result

    @property
    def last_event(self) -> CanonicalEvent:
        return self.calls[-1][0]


def make_token(secret: str = SECRET, algorithm: str = "HS256", **overrides: Any) -> str:
    """Mint a token with the expected audience and issuer."""
    claims = {
        "sub": "user-42",
        "aud": AUDIENCE,
        "iss": ISSUER,
        "iat": int(time.time()),
        "exp": int(time.time()) + 300,
    }
    claims.update(overrides)
    return jwt.encode(claims, secret, algorithm=algorithm)


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[str, str]:
    """An RSA key pair as (private PEM, public PEM)."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    public_pem = private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture
def jwt_settings() -> dict[str, Any]:
    return {"secretOrKey": SECRET, "audience": AUDIENCE, "issuer": ISSUER}


@pytest.fixture
def free_port() -> int:
    """Return a port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def processor() -> RecordingProcessor:
    return RecordingProcessor()


@pytest_asyncio.fixture
async def source(free_port: int, jwt_settings: dict[str, Any]):
    """A running event source with bearer token authentication configured."""
    event_source = HttpEventSource(
        {
            "host": "127.0.0.1",
            "port": free_port,
            "request_body_limit": 1024,
            "file_size_limit": 2048,
            "jwt": jwt_settings,
        }
    )
    await event_source.init()
    yield event_source
    await event_source.close()


@pytest.fixture
def base_url(free_port: int) -> str:
    return f"http://127.0.0.1:{free_port}"
