"""Tests for the client-side dashboard store."""
import pytest

from dashboard_api.client import MAX_STREAMED_ITEMS, DashboardStore


@pytest.fixture
def store():
    return DashboardStore()


class TestCollections:
    def test_update_replaces_matching_record_only(self, store):
        store.set_agents([{"id": "a1", "status": "idle"}, {"id": "a2", "status": "idle"}])

        store.update_agent({"id": "a2", "status": "running"})

        assert store.agents == ({"id": "a1", "status": "idle"}, {"id": "a2", "status": "running"})

    def test_update_for_unknown_id_is_ignored(self, store):
        store.set_tasks([{"id": "t1"}])

        store.update_task({"id": "t9"})

        assert store.tasks == ({"id": "t1"},)

    def test_streamed_items_are_prepended_and_capped(self, store):
        store.set_communications([{"id": str(i)} for i in range(MAX_STREAMED_ITEMS)])

        store.add_communication({"id": "new"})

        assert len(store.communications) == MAX_STREAMED_ITEMS
        assert store.communications[0] == {"id": "new"}
        assert store.communications[-1] == {"id": str(MAX_STREAMED_ITEMS - 2)}

    def test_model_usage_cap_applies_per_insert(self, store):
        for i in range(MAX_STREAMED_ITEMS + 5):
            store.add_model_usage({"id": str(i)})

        assert len(store.model_usage) == MAX_STREAMED_ITEMS
        assert store.model_usage[0]["id"] == str(MAX_STREAMED_ITEMS + 4)

    def test_system_health_upsert(self, store):
        store.upsert_system_health({"id": "h1", "status": "healthy"})
        store.upsert_system_health({"id": "h2", "status": "healthy"})
        store.upsert_system_health({"id": "h1", "status": "down"})

        assert store.system_health == ({"id": "h2", "status": "healthy"}, {"id": "h1", "status": "down"})

    def test_stats_fill_missing_fields(self, store):
        store.set_stats({"totalAgents": 3})

        assert store.stats["totalAgents"] == 3
        assert store.stats["gatewayStatus"] == "healthy"


class TestSelection:
    def test_selected_agent_follows_updates(self, store):
        store.set_agents([{"id": "a1", "name": "Scout"}])
        store.set_selected_agent_id("a1")

        store.update_agent({"id": "a1", "name": "Scout v2"})

        assert store.selected_agent == {"id": "a1", "name": "Scout v2"}

    def test_unsubscribe_twice_is_harmless(self, store):
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(s.active_tab))

        unsubscribe()
        unsubscribe()
        store.set_active_tab("tasks")

        assert seen == []

    def test_selected_agent_missing(self, store):
        store.set_selected_agent_id("ghost")

        assert store.selected_agent is None

    def test_listeners_notified_until_unsubscribed(self, store):
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(s.active_tab))

        store.set_active_tab("agents")
        unsubscribe()
        store.set_sidebar_open(False)

        assert seen == ["agents"]
        assert store.sidebar_open is False


class TestApplyEvent:
    def test_relay_frames_patch_the_cache(self, store):
        store.set_agents([{"id": "a1", "status": "idle"}])
        store.set_workflows([{"id": "w1", "currentStage": "trends"}])

        assert store.apply_event("agent:update", {"id": "a1", "status": "error"})
        assert store.apply_event("communication:new", {"id": "c1"})
        assert store.apply_event("model:usage", {"id": "u1"})
        assert store.apply_event("workflow:update", {"id": "w1", "currentStage": "listing"})
        assert store.apply_event("system:health", {"id": "h1"})

        assert store.agents[0]["status"] == "error"
        assert store.communications == ({"id": "c1"},)
        assert store.model_usage == ({"id": "u1"},)
        assert store.workflows[0]["currentStage"] == "listing"
        assert store.system_health == ({"id": "h1"},)

    def test_unknown_event_ignored(self, store):
        assert store.apply_event("agent:restarted", {"agentId": "a1"}) is False
