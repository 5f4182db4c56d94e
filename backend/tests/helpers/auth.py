"""Helpers for driving the session endpoints from integration tests."""

from __future__ import annotations

API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup(client, email: str = "a@x.com", password: str = "secret1"):
    return client.post(f"{API}/auth/signup", json={"email": email, "password": password})


def signin(client, email: str = "a@x.com", password: str = "secret1") -> dict:
    """Sign in and return the token bundle body (asserts success)."""
    resp = client.post(f"{API}/auth/signin", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()
