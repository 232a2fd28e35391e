"""Pydantic schemas for task creation, updates and reads."""
from datetime import datetime
from typing import Literal

from dashboard_api.models.workflow import StageResult, WorkflowStage
from dashboard_api.schemas.common import AgentSummary, CamelModel

TaskStatus = Literal["pending", "running", "completed", "failed"]


class TaskCreate(CamelModel):
    agent_id: str
    type: str
    product_id: str | None = None
    input_summary: str | None = None
    stage: WorkflowStage | None = None


class TaskUpdate(CamelModel):
    status: TaskStatus | None = None
    output_summary: str | None = None
    stage: WorkflowStage | None = None
    stage_result: StageResult | None = None


class TaskRead(CamelModel):
    id: str
    agent_id: str
    type: str
    status: str
    product_id: str | None = None
    input_summary: str | None = None
    output_summary: str | None = None
    stage: str
    stage_result: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TaskWithAgent(TaskRead):
    agent: AgentSummary | None = None
