"""Tests for loading server snapshots into the client store."""
import httpx
import pytest

from dashboard_api.client import DashboardClient, DashboardConnectionError, DashboardStore
from dashboard_api.main import app


@pytest.mark.asyncio
async def test_snapshot_from_live_api(client):
    await client.post("/api/seed")
    store = DashboardStore()

    async with DashboardClient("http://test", transport=httpx.ASGITransport(app=app)) as dashboard:
        await dashboard.load_snapshot(store)

    assert len(store.agents) == 5
    assert len(store.tasks) == 2
    assert len(store.model_usage) == 3
    assert store.communications[0]["fromAgent"]["name"] == "Trends Scout"
    assert store.workflows[0]["productId"] == "prod_001"
    assert store.system_health[0]["metric"] == "gateway_status"
    assert store.stats["totalAgents"] == 5


@pytest.mark.asyncio
async def test_server_error_raises_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Database connection failed"})

    store = DashboardStore()
    store.set_agents([{"id": "cached"}])

    async with DashboardClient("http://test", transport=httpx.MockTransport(handler)) as dashboard:
        with pytest.raises(DashboardConnectionError, match="Failed to load dashboard data"):
            await dashboard.load_snapshot(store)

    assert store.agents == ({"id": "cached"},)


@pytest.mark.asyncio
async def test_filters_are_forwarded():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json=[])

    async with DashboardClient("http://test", transport=httpx.MockTransport(handler)) as dashboard:
        await dashboard.fetch_tasks(agentId="a1", status=None)

    assert seen[0].path == "/api/tasks"
    assert dict(seen[0].params) == {"agentId": "a1"}
