"""Schemas for agent memory journal entries."""
from datetime import datetime
from typing import Literal

from dashboard_api.schemas.common import CamelModel

MemoryEntryType = Literal["info", "warning", "error", "decision", "memory"]


class MemoryLogCreate(CamelModel):
    agent_id: str
    entry_type: MemoryEntryType = "info"
    summary: str
    details: str | None = None


class MemoryLogRead(CamelModel):
    id: str
    agent_id: str
    entry_type: str
    summary: str
    details: str | None = None
    timestamp: datetime
