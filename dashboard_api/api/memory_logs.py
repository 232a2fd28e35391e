"""Agent memory journal endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.session import get_session
from dashboard_api.models import Agent, MemoryLog
from dashboard_api.schemas.memory_log import MemoryLogCreate, MemoryLogRead

router = APIRouter()


@router.get("", response_model=list[MemoryLogRead])
async def list_memory_logs(
    agent_id: str | None = Query(None, alias="agentId"),
    entry_type: str | None = Query(None, alias="entryType"),
    limit: int = Query(50, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[MemoryLogRead]:
    query = select(MemoryLog)
    if agent_id:
        query = query.where(MemoryLog.agent_id == agent_id)
    if entry_type:
        query = query.where(MemoryLog.entry_type == entry_type)

    async with store_errors("Failed to fetch memory logs"):
        result = await session.execute(query.order_by(MemoryLog.timestamp.desc()).limit(limit))
        return [MemoryLogRead.model_validate(entry) for entry in result.scalars().all()]


@router.post("", response_model=MemoryLogRead, status_code=status.HTTP_201_CREATED)
async def create_memory_log(payload: MemoryLogCreate, session: AsyncSession = Depends(get_session)) -> MemoryLogRead:
    async with store_errors("Failed to create memory log"):
        if not await session.get(Agent, payload.agent_id):
            raise not_found("Agent")

        entry = MemoryLog(
            agent_id=payload.agent_id,
            entry_type=payload.entry_type,
            summary=payload.summary,
            details=payload.details,
        )
        session.add(entry)
        await session.commit()
        await session.refresh(entry)
    return MemoryLogRead.model_validate(entry)
