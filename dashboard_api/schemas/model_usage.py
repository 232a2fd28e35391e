"""Schemas for model invocation records and their aggregates."""
from datetime import datetime

from dashboard_api.schemas.common import AgentSummary, CamelModel


class ModelUsageCreate(CamelModel):
    agent_id: str
    model_name: str
    tokens_used: int | None = None
    latency: float | None = None
    fallback_used: bool | None = None
    success: bool | None = None
    error_message: str | None = None


class ModelUsageRead(CamelModel):
    id: str
    agent_id: str
    model_name: str
    tokens_used: int
    latency: float
    fallback_used: bool
    success: bool
    error_message: str | None = None
    timestamp: datetime


class ModelUsageWithAgent(ModelUsageRead):
    agent: AgentSummary | None = None


class AgentUsageGroup(CamelModel):
    agent_id: str
    count: int
    tokens_used: int


class ModelUsageGroup(CamelModel):
    model_name: str
    count: int
    tokens_used: int


class ModelUsageReport(CamelModel):
    usages: list[ModelUsageWithAgent]
    by_agent: list[AgentUsageGroup]
    by_model: list[ModelUsageGroup]
