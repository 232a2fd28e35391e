"""Pydantic schemas for the Agent model."""
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from dashboard_api.db.codec import load_json_list
from dashboard_api.schemas.common import CamelModel
from dashboard_api.schemas.communication import CommunicationWithAgents
from dashboard_api.schemas.memory_log import MemoryLogRead
from dashboard_api.schemas.model_usage import ModelUsageRead
from dashboard_api.schemas.task import TaskRead

AgentStatus = Literal["idle", "running", "error"]


class AgentCreate(CamelModel):
    name: str
    role: str
    emoji: str | None = None
    system_prompt: str | None = None
    skills: list[str] | None = None
    authorities: list[str] | None = None
    model_primary: str | None = None
    model_fallback: str | None = None


class AgentUpdate(CamelModel):
    name: str | None = None
    role: str | None = None
    emoji: str | None = None
    status: AgentStatus | None = None
    system_prompt: str | None = None
    skills: list[str] | None = None
    authorities: list[str] | None = None
    model_primary: str | None = None
    model_fallback: str | None = None
    disabled: bool | None = None
    total_tasks: int | None = None
    total_calls: int | None = None
    total_tokens: int | None = None
    error_count: int | None = None
    storage_size: int | None = None


class AgentRead(CamelModel):
    id: str
    name: str
    role: str
    emoji: str
    status: str
    system_prompt: str | None = None
    skills: list[str] = Field(default_factory=list)
    authorities: list[str] = Field(default_factory=list)
    model_primary: str
    model_fallback: str | None = None
    total_tasks: int
    total_calls: int
    total_tokens: int
    error_count: int
    storage_size: int
    last_active: datetime | None = None
    disabled: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("skills", "authorities", mode="before")
    @classmethod
    def deserialize_list(cls, value: object) -> list:
        return load_json_list(value)


class AgentCounts(CamelModel):
    tasks: int = 0
    communications: int = 0
    model_usages: int = 0
    memory_logs: int = 0


class AgentOverview(AgentRead):
    tasks: list[TaskRead] = Field(default_factory=list)
    counts: AgentCounts = Field(default_factory=AgentCounts)


class AgentDetail(AgentOverview):
    communications: list[CommunicationWithAgents] = Field(default_factory=list)
    memory_logs: list[MemoryLogRead] = Field(default_factory=list)
    model_usages: list[ModelUsageRead] = Field(default_factory=list)
