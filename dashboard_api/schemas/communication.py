"""Schemas for inter-agent messages."""
from datetime import datetime
from typing import Literal

from dashboard_api.schemas.common import AgentSummary, CamelModel, TaskSummary

CommunicationStatus = Literal["sent", "delivered", "failed"]


class CommunicationCreate(CamelModel):
    from_agent_id: str
    to_agent_id: str
    message: str
    task_id: str | None = None


class CommunicationRead(CamelModel):
    id: str
    from_agent_id: str
    to_agent_id: str
    message: str
    task_id: str | None = None
    status: str
    timestamp: datetime


class CommunicationWithAgents(CommunicationRead):
    from_agent: AgentSummary | None = None
    to_agent: AgentSummary | None = None


class CommunicationDetail(CommunicationWithAgents):
    task: TaskSummary | None = None
