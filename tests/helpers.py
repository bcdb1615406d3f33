"""
Builders for fake backend responses
"""

import json

import requests


def make_response(status=200, payload=None, reason="OK", raw=None):
    """Real requests.Response carrying a JSON (or raw) body"""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if raw is not None:
        response._content = raw
    elif payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
    else:
        response._content = b""
    response.headers["Content-Type"] = "application/json"
    return response


def user_payload(**overrides):
    data = {
        "id": 1,
        "email": "alice@example.com",
        "username": "alice",
        "is_active": True,
        "is_verified": True,
        "is_admin": False,
        "created_at": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return data
