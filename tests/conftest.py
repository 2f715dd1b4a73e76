from __future__ import annotations

import base64
from urllib.parse import quote

import pytest

from otpmigrate.wire import encode_varint

EXAMPLE_URL = (
    "otpauth-migration://offline?data=CkoKDZePmX7z8qHgFlH9yVcSIlRoaXNfaXNfYW5fRXhhbXBsZTplbWFpbEBlbWFpbC5jb20aD0V4"
    "YW1wbGVfV2Vic2l0ZSABKAEwAhABGAEgAA%3D%3D"
)


def field_varint(field: int, value: int) -> bytes:
    return encode_varint(field << 3) + encode_varint(value)


def field_bytes(field: int, value: bytes) -> bytes:
    return encode_varint((field << 3) | 2) + encode_varint(len(value)) + value


def otp_parameters(
    secret: bytes = b"hello",
    name: str = "alice@example.com",
    issuer: str = "GitHub",
    algorithm: int = 1,
    digits: int = 1,
    otp_type: int = 2,
    counter=None,
) -> bytes:
    msg = field_bytes(1, secret) + field_bytes(2, name.encode()) + field_bytes(3, issuer.encode())
    msg += field_varint(4, algorithm) + field_varint(5, digits) + field_varint(6, otp_type)
    if counter is not None:
        msg += field_varint(7, counter)
    return msg


def migration_payload(*accounts: bytes, version: int = 1) -> bytes:
    out = b"".join(field_bytes(1, a) for a in accounts)
    return out + field_varint(2, version) + field_varint(3, 1) + field_varint(4, 0)


def migration_url(payload: bytes) -> str:
    return "otpauth-migration://offline?data=" + quote(base64.b64encode(payload).decode("ascii"), safe="")


@pytest.fixture
def example_url() -> str:
    return EXAMPLE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OTPMIGRATE_URL",
        "OTPMIGRATE_JSON_INDENT",
        "OTPMIGRATE_OTPAUTH_URIS",
        "OTPMIGRATE_HOST",
        "OTPMIGRATE_PORT",
        "OTPMIGRATE_BASIC_AUTH_USER",
        "OTPMIGRATE_BASIC_AUTH_PASSWORD",
    ):
        monkeypatch.delenv(name, raising=False)
