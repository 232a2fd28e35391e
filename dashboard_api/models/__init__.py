"""Import models for Alembic autogeneration."""
from .agent import Agent
from .communication import Communication
from .memory_log import MemoryLog
from .model_usage import ModelUsage
from .system_health import SystemHealth
from .task import Task
from .workflow import ProductWorkflow

__all__ = [
    "Agent",
    "Communication",
    "MemoryLog",
    "ModelUsage",
    "ProductWorkflow",
    "SystemHealth",
    "Task",
]
