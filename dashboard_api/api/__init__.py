"""Expose the aggregated API router."""
from fastapi import APIRouter

from . import agents, communications, memory_logs, model_usage, seed, socket, stats, system_health, tasks, workflows

api_router = APIRouter(prefix="/api")
api_router.include_router(agents.router, prefix="/agents", tags=["agents"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(communications.router, prefix="/communications", tags=["communications"])
api_router.include_router(model_usage.router, prefix="/model-usage", tags=["model-usage"])
api_router.include_router(memory_logs.router, prefix="/memory-logs", tags=["memory-logs"])
api_router.include_router(workflows.router, prefix="/workflows", tags=["workflows"])
api_router.include_router(system_health.router, prefix="/system-health", tags=["system-health"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(seed.router, prefix="/seed", tags=["seed"])
api_router.include_router(socket.router)

__all__ = ["api_router"]
