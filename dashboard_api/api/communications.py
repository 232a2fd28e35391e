"""Inter-agent message log."""
import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.session import get_session
from dashboard_api.models import Agent, Communication
from dashboard_api.realtime import COMMUNICATION_NEW, relay
from dashboard_api.schemas.communication import CommunicationCreate, CommunicationDetail, CommunicationWithAgents

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=list[CommunicationDetail])
async def list_communications(
    from_agent_id: str | None = Query(None, alias="fromAgentId"),
    to_agent_id: str | None = Query(None, alias="toAgentId"),
    task_id: str | None = Query(None, alias="taskId"),
    comm_status: str | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[CommunicationDetail]:
    query = select(Communication).options(
        selectinload(Communication.from_agent),
        selectinload(Communication.to_agent),
        selectinload(Communication.task),
    )
    if from_agent_id:
        query = query.where(Communication.from_agent_id == from_agent_id)
    if to_agent_id:
        query = query.where(Communication.to_agent_id == to_agent_id)
    if task_id:
        query = query.where(Communication.task_id == task_id)
    if comm_status:
        query = query.where(Communication.status == comm_status)

    async with store_errors("Failed to fetch communications"):
        result = await session.execute(query.order_by(Communication.timestamp.desc()).limit(limit))
        return [CommunicationDetail.model_validate(item) for item in result.scalars().all()]


@router.post("", response_model=CommunicationWithAgents, status_code=status.HTTP_201_CREATED)
async def create_communication(
    payload: CommunicationCreate, session: AsyncSession = Depends(get_session)
) -> CommunicationWithAgents:
    async with store_errors("Failed to create communication"):
        for agent_id in (payload.from_agent_id, payload.to_agent_id):
            if not await session.get(Agent, agent_id):
                raise not_found("Agent")

        db_comm = Communication(
            from_agent_id=payload.from_agent_id,
            to_agent_id=payload.to_agent_id,
            message=payload.message,
            task_id=payload.task_id,
            status="sent",
        )
        session.add(db_comm)
        await session.commit()

        result = await session.execute(
            select(Communication)
            .where(Communication.id == db_comm.id)
            .options(selectinload(Communication.from_agent), selectinload(Communication.to_agent))
            .execution_options(populate_existing=True)
        )
        created = CommunicationWithAgents.model_validate(result.scalar_one())

    logger.info("communications.create", communication_id=created.id, from_agent_id=created.from_agent_id)
    await relay.publish(COMMUNICATION_NEW, created.as_event())
    return created
