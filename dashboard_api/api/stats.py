"""Aggregate counters for the dashboard header."""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.api.errors import store_errors
from dashboard_api.db.session import get_session
from dashboard_api.db.queries import count_rows
from dashboard_api.models import Agent, ModelUsage, SystemHealth, Task
from dashboard_api.schemas.stats import DashboardStats

router = APIRouter()

GATEWAY_METRIC = "gateway_status"
RECENT_HEALTH_SAMPLES = 10


@router.get("", response_model=DashboardStats)
async def get_stats(session: AsyncSession = Depends(get_session)) -> DashboardStats:
    async with store_errors("Database connection failed"):
        stats = DashboardStats(
            total_agents=await count_rows(session, Agent),
            active_agents=await count_rows(session, Agent, Agent.status == "running"),
            idle_agents=await count_rows(session, Agent, Agent.status == "idle"),
            error_agents=await count_rows(session, Agent, Agent.status == "error"),
            total_tasks=await count_rows(session, Task),
            completed_tasks=await count_rows(session, Task, Task.status == "completed"),
            failed_tasks=await count_rows(session, Task, Task.status == "failed"),
            active_tasks=await count_rows(session, Task, Task.status.in_(("pending", "running"))),
        )

        # Full scan of the usage table; fine at dashboard scale.
        usages = (
            await session.execute(select(ModelUsage.tokens_used, ModelUsage.fallback_used, ModelUsage.latency))
        ).all()
        health = (
            await session.execute(
                select(SystemHealth).order_by(SystemHealth.last_checked.desc()).limit(RECENT_HEALTH_SAMPLES)
            )
        ).scalars().all()

    stats.total_model_calls = len(usages)
    stats.total_tokens = sum(row.tokens_used for row in usages)
    if usages:
        fallbacks = sum(1 for row in usages if row.fallback_used)
        stats.fallback_rate = fallbacks / len(usages) * 100
        stats.average_latency = sum(row.latency for row in usages) / len(usages)

    gateway = next((sample for sample in health if sample.metric == GATEWAY_METRIC), None)
    stats.gateway_status = gateway.status if gateway else "healthy"
    if health:
        healthy = sum(1 for sample in health if sample.status == "healthy")
        stats.uptime = healthy / len(health) * 100
    else:
        stats.uptime = 100.0
    return stats
