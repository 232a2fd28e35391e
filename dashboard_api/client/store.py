"""Single-writer dashboard state container.

Holds the last fetched snapshot of every collection plus UI selection
state. All mutation goes through the named operations below; collections
are exposed as tuples so readers cannot change them in place. Nothing is
persisted: after a reload or disconnect the snapshot loader refetches
everything.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

MAX_STREAMED_ITEMS = 1000

Record = dict[str, Any]
Listener = Callable[["DashboardStore"], None]

EMPTY_STATS: Record = {
    "totalAgents": 0,
    "activeAgents": 0,
    "idleAgents": 0,
    "errorAgents": 0,
    "totalTasks": 0,
    "completedTasks": 0,
    "failedTasks": 0,
    "activeTasks": 0,
    "totalTokens": 0,
    "totalModelCalls": 0,
    "fallbackRate": 0,
    "averageLatency": 0,
    "gatewayStatus": "healthy",
    "uptime": 0,
}


@dataclass(frozen=True)
class CommunicationFilter:
    agent_id: Optional[str] = None
    task_id: Optional[str] = None
    status: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None


def _replace_by_id(items: tuple[Record, ...], record: Record) -> tuple[Record, ...]:
    return tuple(record if item.get("id") == record.get("id") else item for item in items)


def _prepend_capped(items: tuple[Record, ...], record: Record) -> tuple[Record, ...]:
    return ((record,) + items)[:MAX_STREAMED_ITEMS]


@dataclass
class DashboardStore:
    """Process-wide cache of dashboard collections and selection state."""

    _agents: tuple[Record, ...] = ()
    _tasks: tuple[Record, ...] = ()
    _communications: tuple[Record, ...] = ()
    _model_usage: tuple[Record, ...] = ()
    _workflows: tuple[Record, ...] = ()
    _system_health: tuple[Record, ...] = ()
    _stats: Record = field(default_factory=lambda: dict(EMPTY_STATS))
    communication_filter: CommunicationFilter = field(default_factory=CommunicationFilter)
    selected_agent_id: Optional[str] = None
    selected_workflow_id: Optional[str] = None
    sidebar_open: bool = True
    active_tab: str = "overview"
    _listeners: list[Listener] = field(default_factory=list, repr=False)

    # -- read side -------------------------------------------------------

    @property
    def agents(self) -> tuple[Record, ...]:
        return self._agents

    @property
    def tasks(self) -> tuple[Record, ...]:
        return self._tasks

    @property
    def communications(self) -> tuple[Record, ...]:
        return self._communications

    @property
    def model_usage(self) -> tuple[Record, ...]:
        return self._model_usage

    @property
    def workflows(self) -> tuple[Record, ...]:
        return self._workflows

    @property
    def system_health(self) -> tuple[Record, ...]:
        return self._system_health

    @property
    def stats(self) -> Record:
        return dict(self._stats)

    @property
    def selected_agent(self) -> Optional[Record]:
        return next((agent for agent in self._agents if agent.get("id") == self.selected_agent_id), None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- collections -----------------------------------------------------

    def set_agents(self, agents: list[Record]) -> None:
        self._agents = tuple(agents)
        self._changed()

    def update_agent(self, agent: Record) -> None:
        self._agents = _replace_by_id(self._agents, agent)
        self._changed()

    def set_tasks(self, tasks: list[Record]) -> None:
        self._tasks = tuple(tasks)
        self._changed()

    def update_task(self, task: Record) -> None:
        self._tasks = _replace_by_id(self._tasks, task)
        self._changed()

    def set_communications(self, communications: list[Record]) -> None:
        self._communications = tuple(communications)
        self._changed()

    def add_communication(self, communication: Record) -> None:
        self._communications = _prepend_capped(self._communications, communication)
        self._changed()

    def set_model_usage(self, usages: list[Record]) -> None:
        self._model_usage = tuple(usages)
        self._changed()

    def add_model_usage(self, usage: Record) -> None:
        self._model_usage = _prepend_capped(self._model_usage, usage)
        self._changed()

    def set_workflows(self, workflows: list[Record]) -> None:
        self._workflows = tuple(workflows)
        self._changed()

    def update_workflow(self, workflow: Record) -> None:
        self._workflows = _replace_by_id(self._workflows, workflow)
        self._changed()

    def set_system_health(self, samples: list[Record]) -> None:
        self._system_health = tuple(samples)
        self._changed()

    def upsert_system_health(self, sample: Record) -> None:
        if any(item.get("id") == sample.get("id") for item in self._system_health):
            self._system_health = _replace_by_id(self._system_health, sample)
        else:
            self._system_health = _prepend_capped(self._system_health, sample)
        self._changed()

    def set_stats(self, stats: Record) -> None:
        self._stats = {**EMPTY_STATS, **stats}
        self._changed()

    # -- UI state --------------------------------------------------------

    def set_communication_filter(self, communication_filter: CommunicationFilter) -> None:
        self.communication_filter = communication_filter
        self._changed()

    def set_selected_agent_id(self, agent_id: Optional[str]) -> None:
        self.selected_agent_id = agent_id
        self._changed()

    def set_selected_workflow_id(self, workflow_id: Optional[str]) -> None:
        self.selected_workflow_id = workflow_id
        self._changed()

    def set_sidebar_open(self, is_open: bool) -> None:
        self.sidebar_open = is_open
        self._changed()

    def set_active_tab(self, tab: str) -> None:
        self.active_tab = tab
        self._changed()

    # -- relay -----------------------------------------------------------

    def apply_event(self, event: str, payload: Record) -> bool:
        """Patch the cache from one relay frame. Returns False for events the store ignores."""
        handler = _EVENT_HANDLERS.get(event)
        if handler is None:
            logger.debug("store.ignored_event", relay_event=event)
            return False
        handler(self, payload)
        return True


_EVENT_HANDLERS: dict[str, Callable[[DashboardStore, Record], None]] = {
    "agent:update": DashboardStore.update_agent,
    "task:update": DashboardStore.update_task,
    "communication:new": DashboardStore.add_communication,
    "model:usage": DashboardStore.add_model_usage,
    "system:health": DashboardStore.upsert_system_health,
    "workflow:update": DashboardStore.update_workflow,
}
