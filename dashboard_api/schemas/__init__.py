"""Schema exports."""
from .agent import AgentCounts, AgentCreate, AgentDetail, AgentOverview, AgentRead, AgentUpdate
from .common import AgentSummary, TaskSummary
from .communication import CommunicationCreate, CommunicationDetail, CommunicationRead, CommunicationWithAgents
from .memory_log import MemoryLogCreate, MemoryLogRead
from .model_usage import ModelUsageCreate, ModelUsageRead, ModelUsageReport, ModelUsageWithAgent
from .stats import DashboardStats
from .system_health import SystemHealthCreate, SystemHealthRead
from .task import TaskCreate, TaskRead, TaskUpdate, TaskWithAgent
from .workflow import WorkflowCreate, WorkflowRead, WorkflowUpdate

__all__ = [
    "AgentCounts",
    "AgentCreate",
    "AgentDetail",
    "AgentOverview",
    "AgentRead",
    "AgentSummary",
    "AgentUpdate",
    "CommunicationCreate",
    "CommunicationDetail",
    "CommunicationRead",
    "CommunicationWithAgents",
    "DashboardStats",
    "MemoryLogCreate",
    "MemoryLogRead",
    "ModelUsageCreate",
    "ModelUsageRead",
    "ModelUsageReport",
    "ModelUsageWithAgent",
    "SystemHealthCreate",
    "SystemHealthRead",
    "TaskCreate",
    "TaskRead",
    "TaskSummary",
    "TaskUpdate",
    "TaskWithAgent",
    "WorkflowCreate",
    "WorkflowRead",
    "WorkflowUpdate",
]
