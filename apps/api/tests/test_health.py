import pytest

from config import settings


@pytest.mark.asyncio
async def test_liveness_and_readiness_report_missing_google_client(api_client, monkeypatch):
    client, _ = api_client
    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")

    live = await client.get("/health/live")
    assert live.json() == {"alive": True}

    ready = await client.get("/health/ready")
    assert ready.status_code == 503
    assert "GOOGLE_CLIENT_ID" in ready.json()["missing"]
