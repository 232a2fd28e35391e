"""Tests for dashboard counters, health samples, memory logs and seeding."""
from datetime import datetime, timedelta

import pytest

from dashboard_api.models import SystemHealth


class TestStats:
    @pytest.mark.asyncio
    async def test_empty_database(self, client):
        response = await client.get("/api/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["totalAgents"] == 0
        assert body["totalModelCalls"] == 0
        assert body["fallbackRate"] == 0
        assert body["averageLatency"] == 0
        assert body["gatewayStatus"] == "healthy"
        assert body["uptime"] == 100.0

    @pytest.mark.asyncio
    async def test_counts_and_usage_aggregates(self, client, make_agent, make_task):
        scout = await make_agent()
        await make_agent(name="Validator", role="Validation")
        await client.patch(f"/api/agents/{scout['id']}", json={"status": "running"})
        first = await make_task(scout["id"])
        await make_task(scout["id"])
        await client.patch(f"/api/tasks/{first['id']}", json={"status": "completed"})
        for tokens, latency, fallback in [(100, 1000, False), (200, 2000, False), (300, 3000, True), (400, 2000, False)]:
            await client.post(
                "/api/model-usage",
                json={"agentId": scout["id"], "modelName": "m", "tokensUsed": tokens, "latency": latency,
                      "fallbackUsed": fallback},
            )

        body = (await client.get("/api/stats")).json()

        assert body["totalAgents"] == 2
        assert body["activeAgents"] == 1
        assert body["idleAgents"] == 1
        assert body["totalTasks"] == 2
        assert body["completedTasks"] == 1
        assert body["activeTasks"] == 1
        assert body["totalModelCalls"] == 4
        assert body["totalTokens"] == 1000
        assert body["fallbackRate"] == pytest.approx(25.0)
        assert body["averageLatency"] == pytest.approx(2000.0)

    @pytest.mark.asyncio
    async def test_gateway_status_and_uptime_from_recent_samples(self, client, session_factory):
        now = datetime.utcnow()
        async with session_factory() as session:
            session.add_all(
                [
                    SystemHealth(metric="gateway_status", status="healthy", last_checked=now - timedelta(minutes=10)),
                    SystemHealth(metric="gateway_status", status="degraded", last_checked=now - timedelta(minutes=1)),
                    SystemHealth(metric="database", status="healthy", last_checked=now - timedelta(minutes=5)),
                    SystemHealth(metric="queue", status="healthy", last_checked=now - timedelta(minutes=3)),
                ]
            )
            await session.commit()

        body = (await client.get("/api/stats")).json()

        assert body["gatewayStatus"] == "degraded"
        assert body["uptime"] == pytest.approx(75.0)

    @pytest.mark.asyncio
    async def test_store_failure(self, client, database_down):
        response = await client.get("/api/stats")

        assert response.status_code == 500
        assert response.json() == {"error": "Database connection failed"}


class TestSystemHealth:
    @pytest.mark.asyncio
    async def test_report_and_list(self, client, subscriber):
        await client.post("/api/system-health", json={"metric": "gateway_status", "status": "healthy"})
        response = await client.post(
            "/api/system-health",
            json={"metric": "database", "status": "down", "details": "connection refused"},
        )

        assert response.status_code == 201
        assert subscriber.events("system:health")[-1]["details"] == "connection refused"
        database = (await client.get("/api/system-health", params={"metric": "database"})).json()
        assert [sample["status"] for sample in database] == ["down"]

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, client):
        response = await client.post("/api/system-health", json={"metric": "gateway_status", "status": "fine"})

        assert response.status_code == 422


class TestMemoryLogs:
    @pytest.mark.asyncio
    async def test_create_and_filter(self, client, make_agent):
        agent = await make_agent()
        await client.post("/api/memory-logs", json={"agentId": agent["id"], "summary": "started scan"})
        await client.post(
            "/api/memory-logs",
            json={"agentId": agent["id"], "entryType": "decision", "summary": "dropped product"},
        )

        decisions = (await client.get("/api/memory-logs", params={"entryType": "decision"})).json()
        everything = (await client.get("/api/memory-logs", params={"agentId": agent["id"]})).json()

        assert [entry["summary"] for entry in decisions] == ["dropped product"]
        assert len(everything) == 2
        assert {entry["entryType"] for entry in everything} == {"info", "decision"}

    @pytest.mark.asyncio
    async def test_unknown_agent(self, client):
        response = await client.post("/api/memory-logs", json={"agentId": "ghost", "summary": "x"})

        assert response.status_code == 404


class TestSeed:
    @pytest.mark.asyncio
    async def test_seed_populates_dashboard(self, client):
        response = await client.post("/api/seed")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["created"]["agents"] == 5

        stats = (await client.get("/api/stats")).json()
        assert stats["totalAgents"] == 5
        assert stats["activeAgents"] == 3
        assert stats["totalModelCalls"] == 3
        workflows = (await client.get("/api/workflows")).json()
        assert workflows[0]["stageResults"]["trends"] == "pass"
        assert workflows[0]["currentStage"] == "supplier_intel"
