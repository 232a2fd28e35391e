"""Schemas for product workflows. ``stageResults`` is decoded from its JSON column here."""
from datetime import datetime
from typing import Literal

from pydantic import field_validator

from dashboard_api.db.codec import load_json_object
from dashboard_api.models.workflow import StageResult, WorkflowStage
from dashboard_api.schemas.common import CamelModel

WorkflowStatus = Literal["active", "completed", "failed"]


class WorkflowCreate(CamelModel):
    product_id: str
    product_name: str


class WorkflowUpdate(CamelModel):
    current_stage: WorkflowStage | None = None
    stage_results: dict[WorkflowStage, StageResult] | None = None
    bottleneck: str | None = None
    experiment_id: str | None = None
    status: WorkflowStatus | None = None


class WorkflowRead(CamelModel):
    id: str
    product_id: str
    product_name: str
    current_stage: str
    stage_results: dict[str, str]
    bottleneck: str | None = None
    experiment_id: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    @field_validator("stage_results", mode="before")
    @classmethod
    def deserialize_stage_results(cls, value: object) -> dict:
        return load_json_object(value)
