"""Health samples written by the external checker and read by the dashboard."""
import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.api.errors import store_errors
from dashboard_api.db.session import get_session
from dashboard_api.models import SystemHealth
from dashboard_api.realtime import SYSTEM_HEALTH, relay
from dashboard_api.schemas.system_health import SystemHealthCreate, SystemHealthRead

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[SystemHealthRead])
async def list_system_health(
    metric: str | None = Query(None),
    limit: int = Query(10, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[SystemHealthRead]:
    query = select(SystemHealth)
    if metric:
        query = query.where(SystemHealth.metric == metric)

    async with store_errors("Failed to fetch system health"):
        result = await session.execute(query.order_by(SystemHealth.last_checked.desc()).limit(limit))
        return [SystemHealthRead.model_validate(sample) for sample in result.scalars().all()]


@router.post("", response_model=SystemHealthRead, status_code=status.HTTP_201_CREATED)
async def report_system_health(
    payload: SystemHealthCreate, session: AsyncSession = Depends(get_session)
) -> SystemHealthRead:
    async with store_errors("Failed to record system health"):
        sample = SystemHealth(metric=payload.metric, status=payload.status, details=payload.details)
        session.add(sample)
        await session.commit()
        await session.refresh(sample)

    created = SystemHealthRead.model_validate(sample)
    if created.status != "healthy":
        logger.warning("system_health.degraded", metric=created.metric, status=created.status)
    await relay.publish(SYSTEM_HEALTH, created.as_event())
    return created
