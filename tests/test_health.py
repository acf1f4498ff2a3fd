"""Health endpoint and middleware tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status and version."""
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert "version" in data
    assert data["sessions"]["browser"] == {"plain": 0, "encrypted": 0}


@pytest.mark.asyncio
async def test_health_counts_sessions(client, relay, make_conn):
    relay.connect_browser(make_conn(), "encrypted")
    relay.connect_bot(make_conn(), "plain")
    data = (await client.get("/health")).json()
    assert data["sessions"]["browser"]["encrypted"] == 1
    assert data["sessions"]["bot"]["plain"] == 1


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/health", headers={"X-Request-ID": "trace-42"})
    assert r.headers["X-Request-ID"] == "trace-42"


@pytest.mark.asyncio
async def test_index_page_served(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert "/ws/chat" in r.text
