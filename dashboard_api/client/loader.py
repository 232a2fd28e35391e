"""Fetch full snapshots from the REST API into a :class:`DashboardStore`."""
from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from dashboard_api.client.store import DashboardStore

logger = structlog.get_logger(__name__)


class DashboardConnectionError(RuntimeError):
    """The initial snapshot could not be loaded; the UI shows its retry panel."""


class DashboardClient:
    """Thin async client for the dashboard API.

    The same instance is used for the initial load and for resynchronising
    after a relay disconnect, since the relay keeps no replay log.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, **params: Any) -> Any:
        response = await self._client.get(path, params={k: v for k, v in params.items() if v is not None})
        response.raise_for_status()
        return response.json()

    async def fetch_stats(self) -> dict:
        return await self._get("/api/stats")

    async def fetch_agents(self) -> list[dict]:
        return await self._get("/api/agents")

    async def fetch_agent(self, agent_id: str) -> dict:
        return await self._get(f"/api/agents/{agent_id}")

    async def fetch_tasks(self, **filters: Any) -> list[dict]:
        return await self._get("/api/tasks", **filters)

    async def fetch_communications(self, **filters: Any) -> list[dict]:
        return await self._get("/api/communications", **filters)

    async def fetch_model_usage(self, **filters: Any) -> dict:
        return await self._get("/api/model-usage", **filters)

    async def fetch_workflows(self, **filters: Any) -> list[dict]:
        return await self._get("/api/workflows", **filters)

    async def fetch_system_health(self, **filters: Any) -> list[dict]:
        return await self._get("/api/system-health", **filters)

    async def load_snapshot(self, store: DashboardStore) -> None:
        """Replace every collection in ``store`` with fresh server state."""
        try:
            stats = await self.fetch_stats()
            agents = await self.fetch_agents()
            tasks = await self.fetch_tasks()
            communications = await self.fetch_communications()
            usage = await self.fetch_model_usage()
            workflows = await self.fetch_workflows()
            health = await self.fetch_system_health()
        except httpx.HTTPError as exc:
            logger.error("snapshot.failed", error=str(exc))
            raise DashboardConnectionError("Failed to load dashboard data") from exc

        store.set_stats(stats)
        store.set_agents(agents)
        store.set_tasks(tasks)
        store.set_communications(communications)
        store.set_model_usage(usage.get("usages", []))
        store.set_workflows(workflows)
        store.set_system_health(health)
        logger.info("snapshot.loaded", agents=len(agents), tasks=len(tasks), workflows=len(workflows))
