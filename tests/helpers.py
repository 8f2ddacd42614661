"""
Shared test helpers for the SpoolVault test suite.
"""

import os

API = "/api/v1"

# conftest pins these before anything imports this module
ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "")


def auth_headers(token):
    """Return auth headers dict with Bearer token."""
    return {"Authorization": f"Bearer {token}"}


def login(client, username, password):
    """Login through the OAuth2 form endpoint. Returns the token or None."""
    resp = client.post(f"{API}/auth/login", data={"username": username, "password": password})
    if resp.status_code == 200:
        return resp.json().get("access_token")
    return None


def record_payload(**overrides):
    """A valid single-record body in wire (camelCase) form."""
    payload = {
        "name": "Galaxy Black PLA",
        "manufacturer": "Prusament",
        "material": "1",
        "colorName": "Galaxy Black",
        "colorCode": "#1A1A1A",
        "diameter": 1.75,
        "printTemp": "215",
        "totalWeight": 1,
        "remainingPercentage": 80,
        "status": "opened",
        "spoolType": "spooled",
    }
    payload.update(overrides)
    return payload


def create_record(client, headers, **overrides):
    resp = client.post(f"{API}/records", json=record_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def import_records(client, headers, fmt, **body):
    return client.post(f"{API}/records?import={fmt}", json=body, headers=headers)
