"""Task creation, status updates and listing."""
from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.session import get_session
from dashboard_api.models.agent import Agent
from dashboard_api.models.task import Task
from dashboard_api.models.workflow import FIRST_STAGE
from dashboard_api.realtime import TASK_UPDATE, relay
from dashboard_api.schemas.task import TaskCreate, TaskRead, TaskUpdate, TaskWithAgent

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[TaskWithAgent])
async def list_tasks(
    agent_id: str | None = Query(None, alias="agentId"),
    task_status: str | None = Query(None, alias="status"),
    stage: str | None = Query(None),
    limit: int = Query(100, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[TaskWithAgent]:
    query = select(Task).options(selectinload(Task.agent))
    if agent_id:
        query = query.where(Task.agent_id == agent_id)
    if task_status:
        query = query.where(Task.status == task_status)
    if stage:
        query = query.where(Task.stage == stage)

    async with store_errors("Failed to fetch tasks"):
        result = await session.execute(query.order_by(Task.created_at.desc()).limit(limit))
        return [TaskWithAgent.model_validate(task) for task in result.scalars().all()]


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, session: AsyncSession = Depends(get_session)) -> TaskRead:
    async with store_errors("Failed to create task"):
        if not await session.get(Agent, payload.agent_id):
            raise not_found("Agent")

        db_task = Task(
            agent_id=payload.agent_id,
            type=payload.type,
            status="pending",
            product_id=payload.product_id,
            input_summary=payload.input_summary,
            stage=payload.stage or FIRST_STAGE,
            started_at=datetime.utcnow(),
        )
        session.add(db_task)
        await session.commit()
        await session.refresh(db_task)

    created = TaskRead.model_validate(db_task)
    logger.info("tasks.create", task_id=created.id, agent_id=created.agent_id, stage=created.stage)
    await relay.publish(TASK_UPDATE, created.as_event())
    return created


@router.get("/{task_id}", response_model=TaskWithAgent)
async def get_task(task_id: str, session: AsyncSession = Depends(get_session)) -> TaskWithAgent:
    async with store_errors("Failed to fetch task"):
        result = await session.execute(select(Task).where(Task.id == task_id).options(selectinload(Task.agent)))
        db_task = result.scalar_one_or_none()
        if not db_task:
            raise not_found("Task")
        return TaskWithAgent.model_validate(db_task)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(task_id: str, payload: TaskUpdate, session: AsyncSession = Depends(get_session)) -> TaskRead:
    async with store_errors("Failed to update task"):
        db_task = await session.get(Task, task_id)
        if not db_task:
            raise not_found("Task")

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_task, field, value)
        if payload.status == "completed":
            db_task.completed_at = datetime.utcnow()
        await session.commit()
        await session.refresh(db_task)

    updated = TaskRead.model_validate(db_task)
    await relay.publish(TASK_UPDATE, updated.as_event())
    return updated
