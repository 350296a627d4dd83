"""Tests for the token factory and owner resolution on the API."""

from stashbox.core.config import settings
from stashbox.core.token_factory import create_token, decode_token

BASE = "/api/file-system"


class TestTokenFactory:

    def test_create_and_decode(self):
        token = create_token("alice", "test-secret")
        payload = decode_token(token, "test-secret")
        assert payload is not None
        assert payload.sub == "alice"

    def test_wrong_secret_returns_none(self):
        token = create_token("alice", "correct-secret")
        assert decode_token(token, "wrong-secret") is None

    def test_expired_token_returns_none(self):
        token = create_token("alice", "secret", expires_hours=-1)
        assert decode_token(token, "secret") is None

    def test_malformed_token_returns_none(self):
        assert decode_token("not.a.token", "secret") is None
        assert decode_token("", "secret") is None

    def test_empty_subject_returns_none(self):
        assert decode_token(create_token("", "secret"), "secret") is None


class TestAuthDisabledMode:
    """AUTH_ENABLED=false: every request acts as DEV_USER_ID."""

    def test_request_without_token_succeeds(self, client):
        resp = client.post(f"{BASE}/folders", json={"name": "Docs"})
        assert resp.status_code == 201


class TestAuthEnabledMode:

    def _token_headers(self, owner: str) -> dict:
        return {"Authorization": f"Bearer {create_token(owner, settings.jwt_secret_key)}"}

    def test_missing_token_is_401(self, client, monkeypatch):
        monkeypatch.setattr(settings, "auth_enabled", True)
        resp = client.get(f"{BASE}/folders")
        assert resp.status_code == 401
        assert resp.json()["error"] == "UNAUTHORIZED"

    def test_invalid_token_is_401(self, client, monkeypatch):
        monkeypatch.setattr(settings, "auth_enabled", True)
        resp = client.get(f"{BASE}/folders", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_valid_token_succeeds(self, client, monkeypatch, auth_headers):
        monkeypatch.setattr(settings, "auth_enabled", True)
        resp = client.get(f"{BASE}/stats", headers=auth_headers)
        assert resp.status_code == 200

    def test_tenants_are_isolated(self, client, monkeypatch):
        monkeypatch.setattr(settings, "auth_enabled", True)
        alice = self._token_headers("alice")
        bob = self._token_headers("bob")

        folder = client.post(f"{BASE}/folders", json={"name": "Private"}, headers=alice).json()["data"]

        assert client.get(f"{BASE}/folders/{folder['id']}", headers=bob).status_code == 404
        assert client.delete(f"{BASE}/folders/{folder['id']}", headers=bob).status_code == 404
        assert client.get(f"{BASE}/folders", headers=bob).json()["data"] == []
        assert client.get(f"{BASE}/folders/{folder['id']}", headers=alice).status_code == 200
