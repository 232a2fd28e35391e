"""Model invocation log and per-agent/per-model aggregates."""
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.session import get_session
from dashboard_api.models import Agent, ModelUsage
from dashboard_api.realtime import AGENT_UPDATE, MODEL_USAGE, relay
from dashboard_api.schemas.agent import AgentRead
from dashboard_api.schemas.model_usage import (
    AgentUsageGroup,
    ModelUsageCreate,
    ModelUsageGroup,
    ModelUsageRead,
    ModelUsageReport,
    ModelUsageWithAgent,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=ModelUsageReport)
async def list_model_usage(
    agent_id: str | None = Query(None, alias="agentId"),
    limit: int = Query(100, ge=1),
    session: AsyncSession = Depends(get_session),
) -> ModelUsageReport:
    criteria = [ModelUsage.agent_id == agent_id] if agent_id else []
    tokens = func.coalesce(func.sum(ModelUsage.tokens_used), 0)

    async with store_errors("Failed to fetch model usage"):
        usages = await session.execute(
            select(ModelUsage)
            .where(*criteria)
            .options(selectinload(ModelUsage.agent))
            .order_by(ModelUsage.timestamp.desc())
            .limit(limit)
        )
        by_agent = await session.execute(
            select(ModelUsage.agent_id, func.count(), tokens).where(*criteria).group_by(ModelUsage.agent_id)
        )
        by_model = await session.execute(
            select(ModelUsage.model_name, func.count(), tokens).where(*criteria).group_by(ModelUsage.model_name)
        )
        return ModelUsageReport(
            usages=[ModelUsageWithAgent.model_validate(usage) for usage in usages.scalars().all()],
            by_agent=[
                AgentUsageGroup(agent_id=row[0], count=row[1], tokens_used=row[2]) for row in by_agent.all()
            ],
            by_model=[
                ModelUsageGroup(model_name=row[0], count=row[1], tokens_used=row[2]) for row in by_model.all()
            ],
        )


@router.post("", response_model=ModelUsageRead, status_code=status.HTTP_201_CREATED)
async def log_model_usage(payload: ModelUsageCreate, session: AsyncSession = Depends(get_session)) -> ModelUsageRead:
    """Record one invocation and bump the owning agent's counters.

    The usage row and the counter increment are committed together, so a
    failure leaves neither behind.
    """
    tokens_used = payload.tokens_used or 0
    success = payload.success is not False

    async with store_errors("Failed to log model usage"):
        if not await session.get(Agent, payload.agent_id):
            raise not_found("Agent")

        usage = ModelUsage(
            agent_id=payload.agent_id,
            model_name=payload.model_name,
            tokens_used=tokens_used,
            latency=payload.latency or 0,
            fallback_used=bool(payload.fallback_used),
            success=success,
            error_message=payload.error_message,
        )
        session.add(usage)

        counters = {
            "total_calls": Agent.total_calls + 1,
            "total_tokens": Agent.total_tokens + tokens_used,
            "last_active": datetime.utcnow(),
        }
        if not success:
            counters["error_count"] = Agent.error_count + 1
        await session.execute(
            update(Agent)
            .where(Agent.id == payload.agent_id)
            .values(**counters)
            .execution_options(synchronize_session=False)
        )
        await session.commit()
        await session.refresh(usage)

        agent = await session.get(Agent, payload.agent_id, populate_existing=True)
        created = ModelUsageRead.model_validate(usage)
        agent_event = AgentRead.model_validate(agent).as_event()

    logger.info(
        "model_usage.logged",
        agent_id=created.agent_id,
        model=created.model_name,
        tokens=created.tokens_used,
        fallback=created.fallback_used,
    )
    await relay.publish(MODEL_USAGE, created.as_event())
    await relay.publish(AGENT_UPDATE, agent_event)
    return created
