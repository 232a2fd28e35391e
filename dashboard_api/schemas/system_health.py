"""Schemas for health samples."""
from datetime import datetime
from typing import Literal

from dashboard_api.schemas.common import CamelModel

HealthStatus = Literal["healthy", "degraded", "down"]


class SystemHealthCreate(CamelModel):
    metric: str
    status: HealthStatus
    details: str | None = None


class SystemHealthRead(CamelModel):
    id: str
    metric: str
    status: str
    details: str | None = None
    last_checked: datetime
