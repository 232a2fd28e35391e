"""Real-time event relay."""
from .relay import (
    AGENT_UPDATE,
    COMMUNICATION_NEW,
    MODEL_USAGE,
    OUTBOUND_EVENTS,
    SYSTEM_HEALTH,
    TASK_UPDATE,
    WORKFLOW_UPDATE,
    EventRelay,
    relay,
)

__all__ = [
    "AGENT_UPDATE",
    "COMMUNICATION_NEW",
    "MODEL_USAGE",
    "OUTBOUND_EVENTS",
    "SYSTEM_HEALTH",
    "TASK_UPDATE",
    "WORKFLOW_UPDATE",
    "EventRelay",
    "relay",
]
