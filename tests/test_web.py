from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import migration_payload, migration_url, otp_parameters
from otpmigrate.web import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestDecodeEndpoint:
    def test_example(self, client: TestClient, example_url: str) -> None:
        resp = client.post("/decode", json={"url": example_url})
        assert resp.status_code == 200
        body = resp.json()
        assert body["batch"] == {"version": 1, "batch_size": 1, "batch_index": 0, "batch_id": None}
        [acct] = body["accounts"]
        assert acct["name"] == "This_is_an_Example:email@email.com"
        assert acct["type"] == "TOTP"
        assert acct["digits"] == 6
        assert "uri" not in acct

    def test_with_uris(self, client: TestClient) -> None:
        url = migration_url(migration_payload(otp_parameters(name="alice", issuer="GitHub")))
        resp = client.post("/decode", json={"url": url, "otpauth_uris": True})
        assert resp.status_code == 200
        assert resp.json()["accounts"][0]["uri"].startswith("otpauth://totp/GitHub:alice?")

    def test_malformed_transport(self, client: TestClient) -> None:
        resp = client.post("/decode", json={"url": "https://example.com/"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "MalformedTransport"

    def test_bad_payload(self, client: TestClient) -> None:
        resp = client.post("/decode", json={"url": migration_url(migration_payload(otp_parameters(otp_type=9)))})
        assert resp.status_code == 422
        assert resp.json()["detail"]["error"] == "UnknownEnumIndex"

    def test_truncated_payload(self, client: TestClient) -> None:
        resp = client.post("/decode", json={"url": migration_url(b"\x0a\x7f")})
        assert resp.status_code == 422
        assert resp.json()["detail"]["error"] == "TruncatedInput"

    def test_request_body_is_validated(self, client: TestClient) -> None:
        resp = client.post("/decode", json={"otpauth_uris": True})
        assert resp.status_code == 422
        assert resp.json()["detail"][0]["loc"] == ["body", "url"]

    def test_healthz(self, client: TestClient) -> None:
        assert client.get("/healthz").json() == {"ok": True}


class TestBasicAuth:
    @pytest.fixture
    def client(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OTPMIGRATE_BASIC_AUTH_USER", "admin")
        monkeypatch.setenv("OTPMIGRATE_BASIC_AUTH_PASSWORD", "s3cret")
        with TestClient(app) as c:
            yield c

    def test_missing_credentials(self, client: TestClient, example_url: str) -> None:
        resp = client.post("/decode", json={"url": example_url})
        assert resp.status_code == 401

    def test_wrong_password(self, client: TestClient, example_url: str) -> None:
        resp = client.post("/decode", json={"url": example_url}, auth=("admin", "nope"))
        assert resp.status_code == 401

    def test_valid_credentials(self, client: TestClient, example_url: str) -> None:
        resp = client.post("/decode", json={"url": example_url}, auth=("admin", "s3cret"))
        assert resp.status_code == 200
