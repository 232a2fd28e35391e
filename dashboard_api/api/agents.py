"""Agent CRUD endpoints."""

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.codec import dump_json
from dashboard_api.db.session import get_session
from dashboard_api.db.queries import count_rows
from dashboard_api.models import Agent, Communication, MemoryLog, ModelUsage, Task
from dashboard_api.models.agent import DEFAULT_EMOJI
from dashboard_api.realtime import AGENT_UPDATE, relay
from dashboard_api.schemas.agent import (
    AgentCounts,
    AgentCreate,
    AgentDetail,
    AgentOverview,
    AgentRead,
    AgentUpdate,
)
from dashboard_api.schemas.communication import CommunicationWithAgents
from dashboard_api.schemas.memory_log import MemoryLogRead
from dashboard_api.schemas.model_usage import ModelUsageRead
from dashboard_api.schemas.task import TaskRead
from dashboard_api.settings import settings

logger = structlog.get_logger(__name__)

router = APIRouter()

JSON_LIST_FIELDS = ("skills", "authorities")
NULLABLE_FIELDS = ("system_prompt", "model_fallback")


def _involves(agent_id: str):
    return or_(Communication.from_agent_id == agent_id, Communication.to_agent_id == agent_id)


async def _agent_counts(session: AsyncSession, agent_id: str) -> AgentCounts:
    return AgentCounts(
        tasks=await count_rows(session, Task, Task.agent_id == agent_id),
        communications=await count_rows(session, Communication, _involves(agent_id)),
        model_usages=await count_rows(session, ModelUsage, ModelUsage.agent_id == agent_id),
        memory_logs=await count_rows(session, MemoryLog, MemoryLog.agent_id == agent_id),
    )


async def _recent_tasks(session: AsyncSession, agent_id: str, limit: int) -> list[TaskRead]:
    result = await session.execute(
        select(Task).where(Task.agent_id == agent_id).order_by(Task.created_at.desc()).limit(limit)
    )
    return [TaskRead.model_validate(task) for task in result.scalars().all()]


@router.get("", response_model=list[AgentOverview])
async def list_agents(session: AsyncSession = Depends(get_session)) -> list[AgentOverview]:
    async with store_errors("Failed to fetch agents"):
        result = await session.execute(select(Agent).order_by(Agent.created_at.desc()))
        overviews = []
        for agent in result.scalars().all():
            overviews.append(
                AgentOverview(
                    **AgentRead.model_validate(agent).model_dump(),
                    tasks=await _recent_tasks(session, agent.id, 10),
                    counts=await _agent_counts(session, agent.id),
                )
            )
    return overviews


@router.post("", response_model=AgentRead, status_code=status.HTTP_201_CREATED)
async def create_agent(payload: AgentCreate, session: AsyncSession = Depends(get_session)) -> AgentRead:
    async with store_errors("Failed to create agent"):
        db_agent = Agent(
            name=payload.name,
            role=payload.role,
            emoji=payload.emoji or DEFAULT_EMOJI,
            status="idle",
            system_prompt=payload.system_prompt,
            skills=dump_json(payload.skills or []),
            authorities=dump_json(payload.authorities or []),
            model_primary=payload.model_primary or settings.default_model,
            model_fallback=payload.model_fallback,
        )
        session.add(db_agent)
        await session.commit()
        await session.refresh(db_agent)
    logger.info("agents.create", agent_id=db_agent.id, name=db_agent.name)
    return AgentRead.model_validate(db_agent)


@router.get("/{agent_id}", response_model=AgentDetail)
async def get_agent(agent_id: str, session: AsyncSession = Depends(get_session)) -> AgentDetail:
    async with store_errors("Failed to fetch agent"):
        agent = await session.get(Agent, agent_id)
        if not agent:
            raise not_found("Agent")

        communications = await session.execute(
            select(Communication)
            .where(_involves(agent_id))
            .options(selectinload(Communication.from_agent), selectinload(Communication.to_agent))
            .order_by(Communication.timestamp.desc())
            .limit(50)
        )
        memory_logs = await session.execute(
            select(MemoryLog).where(MemoryLog.agent_id == agent_id).order_by(MemoryLog.timestamp.desc()).limit(50)
        )
        usages = await session.execute(
            select(ModelUsage).where(ModelUsage.agent_id == agent_id).order_by(ModelUsage.timestamp.desc()).limit(100)
        )
        return AgentDetail(
            **AgentRead.model_validate(agent).model_dump(),
            tasks=await _recent_tasks(session, agent_id, 50),
            communications=[CommunicationWithAgents.model_validate(c) for c in communications.scalars().all()],
            memory_logs=[MemoryLogRead.model_validate(m) for m in memory_logs.scalars().all()],
            model_usages=[ModelUsageRead.model_validate(u) for u in usages.scalars().all()],
            counts=await _agent_counts(session, agent_id),
        )


@router.patch("/{agent_id}", response_model=AgentRead)
async def update_agent(
    agent_id: str, payload: AgentUpdate, session: AsyncSession = Depends(get_session)
) -> AgentRead:
    async with store_errors("Failed to update agent"):
        agent = await session.get(Agent, agent_id)
        if not agent:
            raise not_found("Agent")

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field not in NULLABLE_FIELDS:
                continue
            if field in JSON_LIST_FIELDS:
                value = dump_json(value)
            setattr(agent, field, value)
        await session.commit()
        await session.refresh(agent)

    updated = AgentRead.model_validate(agent)
    await relay.publish(AGENT_UPDATE, updated.as_event())
    return updated


@router.delete("/{agent_id}")
async def delete_agent(agent_id: str, session: AsyncSession = Depends(get_session)) -> dict:
    async with store_errors("Failed to delete agent"):
        agent = await session.get(Agent, agent_id)
        if not agent:
            raise not_found("Agent")

        # SQLite does not enforce ON DELETE CASCADE unless foreign keys are enabled.
        owned_tasks = select(Task.id).where(Task.agent_id == agent_id)
        await session.execute(delete(Communication).where(_involves(agent_id)))
        await session.execute(
            update(Communication).where(Communication.task_id.in_(owned_tasks)).values(task_id=None)
        )
        await session.execute(delete(Task).where(Task.agent_id == agent_id))
        await session.execute(delete(ModelUsage).where(ModelUsage.agent_id == agent_id))
        await session.execute(delete(MemoryLog).where(MemoryLog.agent_id == agent_id))
        await session.delete(agent)
        await session.commit()
    logger.info("agents.delete", agent_id=agent_id)
    return {"success": True}
