from __future__ import annotations

import sys
from pathlib import Path

import pytest
from argon2 import PasswordHasher
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from accounts.app import create_app  # noqa: E402
from accounts.core.config import Settings  # noqa: E402
from accounts.core.passwords import Passwords  # noqa: E402


def make_keypair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture(scope="session")
def make_keys():
    return make_keypair


@pytest.fixture(scope="session")
def keypair() -> tuple[str, str]:
    return make_keypair()


@pytest.fixture
def settings(keypair) -> Settings:
    private_pem, public_pem = keypair
    # one-line, "\n"-escaped PEM the way it sits in a .env file
    return Settings(
        _env_file=None,
        APP_ENV="test",
        DATABASE_URL="sqlite://",
        JWT_PRIVATE_KEY=private_pem.replace("\n", "\\n"),
        JWT_PUBLIC_KEY=public_pem.replace("\n", "\\n"),
        FRONT_API_BASE_URL="https://app.example.com/",
    )


@pytest.fixture
def fast_passwords() -> Passwords:
    return Passwords(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


@pytest.fixture
def app(settings, fast_passwords):
    return create_app(settings, passwords=fast_passwords)


@pytest.fixture
def client(app):
    # https so Secure cookies are stored and sent back
    with TestClient(app, base_url="https://testserver") as c:
        yield c


@pytest.fixture
def alice(client) -> dict:
    payload = {"username": "alice", "email": "A@x.com ", "password": "longpass1"}
    r = client.post("/users", json=payload)
    assert r.status_code == 201, r.text
    return {**r.json()["data"], "password": payload["password"]}
