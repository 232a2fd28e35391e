"""Tests for the agent endpoints."""
import pytest

from dashboard_api.models import MemoryLog


class TestCreateAgent:
    """POST /api/agents applies defaults for omitted optional fields."""

    @pytest.mark.asyncio
    async def test_defaults(self, make_agent):
        agent = await make_agent()

        assert agent["emoji"] == "🤖"
        assert agent["status"] == "idle"
        assert agent["skills"] == []
        assert agent["authorities"] == []
        assert agent["modelPrimary"] == "minimax-portal/MiniMax-M2.5"
        assert agent["totalCalls"] == 0
        assert agent["disabled"] is False

    @pytest.mark.asyncio
    async def test_list_fields_round_trip_as_arrays(self, client, make_agent):
        agent = await make_agent(skills=["scrape", "rank"], authorities=["approve"], emoji="🔍")

        response = await client.get(f"/api/agents/{agent['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["skills"] == ["scrape", "rank"]
        assert body["authorities"] == ["approve"]
        assert body["emoji"] == "🔍"

    @pytest.mark.asyncio
    async def test_explicit_nulls_take_defaults(self, make_agent):
        agent = await make_agent(emoji=None, skills=None, authorities=None)

        assert agent["emoji"] == "🤖"
        assert agent["skills"] == []
        assert agent["authorities"] == []

    @pytest.mark.asyncio
    async def test_missing_required_field(self, client):
        response = await client.post("/api/agents", json={"role": "Research"})

        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request"


class TestReadAgents:
    @pytest.mark.asyncio
    async def test_list_embeds_recent_tasks_and_counts(self, client, make_agent, make_task):
        agent = await make_agent()
        other = await make_agent(name="Validator", role="Validation")
        await make_task(agent["id"])
        await make_task(agent["id"], stage="listing")

        response = await client.get("/api/agents")

        assert response.status_code == 200
        by_id = {item["id"]: item for item in response.json()}
        assert len(by_id[agent["id"]]["tasks"]) == 2
        assert by_id[agent["id"]]["counts"]["tasks"] == 2
        assert by_id[other["id"]]["tasks"] == []
        assert by_id[other["id"]]["counts"] == {"tasks": 0, "communications": 0, "modelUsages": 0, "memoryLogs": 0}

    @pytest.mark.asyncio
    async def test_missing_agent_returns_404(self, client):
        response = await client.get("/api/agents/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Agent not found"}

    @pytest.mark.asyncio
    async def test_detail_includes_activity(self, client, session_factory, make_agent, make_task):
        agent = await make_agent()
        peer = await make_agent(name="Supplier Intel", role="Suppliers")
        await make_task(agent["id"])
        await client.post(
            "/api/communications",
            json={"fromAgentId": peer["id"], "toAgentId": agent["id"], "message": "suppliers found"},
        )
        await client.post("/api/model-usage", json={"agentId": agent["id"], "modelName": "m", "tokensUsed": 10})
        async with session_factory() as session:
            session.add(MemoryLog(agent_id=agent["id"], entry_type="decision", summary="picked planter"))
            await session.commit()

        body = (await client.get(f"/api/agents/{agent['id']}")).json()

        assert len(body["tasks"]) == 1
        assert body["communications"][0]["fromAgent"]["name"] == "Supplier Intel"
        assert body["memoryLogs"][0]["summary"] == "picked planter"
        assert body["modelUsages"][0]["tokensUsed"] == 10
        assert body["counts"] == {"tasks": 1, "communications": 1, "modelUsages": 1, "memoryLogs": 1}


class TestUpdateAgent:
    @pytest.mark.asyncio
    async def test_only_present_fields_change(self, client, make_agent):
        agent = await make_agent(systemPrompt="be terse")

        response = await client.patch(f"/api/agents/{agent['id']}", json={"status": "running", "skills": ["x"]})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "running"
        assert body["skills"] == ["x"]
        assert body["name"] == agent["name"]
        assert body["systemPrompt"] == "be terse"

    @pytest.mark.asyncio
    async def test_null_for_required_column_is_ignored(self, client, make_agent):
        agent = await make_agent()

        response = await client.patch(f"/api/agents/{agent['id']}", json={"name": None, "modelFallback": None})

        assert response.status_code == 200
        assert response.json()["name"] == agent["name"]

    @pytest.mark.asyncio
    async def test_publishes_agent_update(self, client, make_agent, subscriber):
        agent = await make_agent()

        await client.patch(f"/api/agents/{agent['id']}", json={"disabled": True})

        updates = subscriber.events("agent:update")
        assert len(updates) == 1
        assert updates[0]["id"] == agent["id"]
        assert updates[0]["disabled"] is True

    @pytest.mark.asyncio
    async def test_invalid_status_rejected(self, client, make_agent):
        agent = await make_agent()

        response = await client.patch(f"/api/agents/{agent['id']}", json={"status": "sleeping"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_agent(self, client):
        response = await client.patch("/api/agents/nope", json={"status": "idle"})

        assert response.status_code == 404
        assert response.json() == {"error": "Agent not found"}


class TestDeleteAgent:
    @pytest.mark.asyncio
    async def test_delete_cascades_owned_rows(self, client, make_agent, make_task):
        agent = await make_agent()
        peer = await make_agent(name="Validator", role="Validation")
        task = await make_task(agent["id"])
        await client.post(
            "/api/communications",
            json={"fromAgentId": agent["id"], "toAgentId": peer["id"], "message": "done", "taskId": task["id"]},
        )
        await client.post("/api/model-usage", json={"agentId": agent["id"], "modelName": "m"})

        response = await client.delete(f"/api/agents/{agent['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get(f"/api/agents/{agent['id']}")).status_code == 404
        assert (await client.get("/api/tasks", params={"agentId": agent["id"]})).json() == []
        assert (await client.get("/api/communications")).json() == []
        assert (await client.get("/api/model-usage")).json()["usages"] == []
        assert (await client.get(f"/api/agents/{peer['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_delete_missing_agent(self, client):
        response = await client.delete("/api/agents/nope")

        assert response.status_code == 404
