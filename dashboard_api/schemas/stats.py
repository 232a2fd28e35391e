"""Dashboard counters returned by ``GET /api/stats``."""
from dashboard_api.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_agents: int = 0
    active_agents: int = 0
    idle_agents: int = 0
    error_agents: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    failed_tasks: int = 0
    active_tasks: int = 0
    total_tokens: int = 0
    total_model_calls: int = 0
    fallback_rate: float = 0.0
    average_latency: float = 0.0
    gateway_status: str = "healthy"
    uptime: float = 0.0
