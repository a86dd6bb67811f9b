"""
Tests for version endpoint
"""
from shiftdesk.core.config import settings


def test_version_endpoint(client):
    response = client.get("/api/v1/version")

    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "shiftdesk-backend"
    assert data["version"] == (settings.VERSION or "1.0.0")
    assert data["env"] == settings.APP_ENV
    assert data["tz"] == settings.TZ
