"""Per-product pipeline projection and the fixed stage enumeration."""
from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args
import uuid

from sqlalchemy import Column, DateTime, String, Text

from dashboard_api.db.codec import dump_json
from dashboard_api.db.session import Base

WorkflowStage = Literal[
    "trends",
    "supplier_intel",
    "risk_model",
    "validator",
    "verification",
    "listing",
    "content",
    "performance",
]
StageResult = Literal["pass", "fail", "pending"]

# Pipeline order. Every stage default and stage-sequence lookup reads from here.
WORKFLOW_STAGES: tuple[str, ...] = get_args(WorkflowStage)
FIRST_STAGE = WORKFLOW_STAGES[0]


def initial_stage_results() -> dict[str, str]:
    return {stage: "pending" for stage in WORKFLOW_STAGES}


def next_stage(stage: str) -> str | None:
    """Return the stage after ``stage``, or ``None`` for the last one."""
    index = WORKFLOW_STAGES.index(stage)
    if index + 1 < len(WORKFLOW_STAGES):
        return WORKFLOW_STAGES[index + 1]
    return None


class ProductWorkflow(Base):
    __tablename__ = "product_workflows"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    current_stage = Column(String, nullable=False, default=FIRST_STAGE)
    stage_results = Column(Text, nullable=False, default=lambda: dump_json(initial_stage_results()))
    bottleneck = Column(String, nullable=True)
    experiment_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
