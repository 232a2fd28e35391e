"""In-process fan-out of entity-change events to connected dashboard sessions.

Delivery is at-most-once and best-effort: there is no replay log, so a
session that was disconnected while an event was published never sees it
and must refetch snapshots through the REST API. A subscriber whose send
fails or stalls is dropped from the relay.
"""
from __future__ import annotations

import asyncio
import uuid
from typing import Any, Awaitable, Callable, Protocol

import structlog
from prometheus_client import Counter, Gauge

logger = structlog.get_logger(__name__)

AGENT_UPDATE = "agent:update"
TASK_UPDATE = "task:update"
COMMUNICATION_NEW = "communication:new"
MODEL_USAGE = "model:usage"
SYSTEM_HEALTH = "system:health"
WORKFLOW_UPDATE = "workflow:update"

OUTBOUND_EVENTS = frozenset(
    {AGENT_UPDATE, TASK_UPDATE, COMMUNICATION_NEW, MODEL_USAGE, SYSTEM_HEALTH, WORKFLOW_UPDATE}
)

AGENT_RESTART = "agent:restart"
AGENT_DISABLE = "agent:disable"
AGENT_UPDATE_PROMPT = "agent:updatePrompt"
AGENT_CLEAR_WORKSPACE = "agent:clearWorkspace"

SEND_TIMEOUT_SECONDS = 5.0

RELAY_SUBSCRIBERS = Gauge("relay_subscribers", "Currently connected real-time subscribers")
RELAY_EVENTS = Counter("relay_events_total", "Events published through the relay", ["event"])
RELAY_CONTROL_MESSAGES = Counter("relay_control_messages_total", "Control messages received from clients", ["event"])


class Subscriber(Protocol):
    async def send_json(self, data: Any) -> None: ...


ControlHandler = Callable[[str, dict, Subscriber], Awaitable[None]]


def frame(event: str, data: Any) -> dict:
    return {"event": event, "data": data}


class EventRelay:
    """Broadcast channel between the API handlers and WebSocket sessions."""

    def __init__(self, send_timeout: float = SEND_TIMEOUT_SECONDS) -> None:
        self.send_timeout = send_timeout
        self._subscribers: dict[str, Subscriber] = {}
        self._control_handlers: dict[str, ControlHandler] = {
            AGENT_RESTART: self._on_agent_restart,
            AGENT_DISABLE: self._on_agent_disable,
            AGENT_UPDATE_PROMPT: self._on_agent_update_prompt,
            AGENT_CLEAR_WORKSPACE: self._on_agent_clear_workspace,
        }

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> str:
        subscriber_id = str(uuid.uuid4())
        self._subscribers[subscriber_id] = subscriber
        RELAY_SUBSCRIBERS.set(len(self._subscribers))
        logger.info("relay.connected", subscriber_id=subscriber_id, subscribers=len(self._subscribers))
        return subscriber_id

    def unsubscribe(self, subscriber_id: str) -> None:
        if self._subscribers.pop(subscriber_id, None) is not None:
            RELAY_SUBSCRIBERS.set(len(self._subscribers))
            logger.info("relay.disconnected", subscriber_id=subscriber_id, subscribers=len(self._subscribers))

    async def publish(self, event: str, data: Any) -> int:
        """Send ``data`` under ``event`` to every subscriber concurrently. Returns the delivered count.

        A subscriber that fails or does not accept the frame within
        ``send_timeout`` seconds is dropped.
        """
        if event not in OUTBOUND_EVENTS:
            raise ValueError(f"Unknown relay event: {event}")

        RELAY_EVENTS.labels(event=event).inc()
        message = frame(event, data)
        targets = list(self._subscribers.items())
        results = await asyncio.gather(
            *(self._deliver(subscriber_id, subscriber, event, message) for subscriber_id, subscriber in targets)
        )

        for (subscriber_id, _), delivered in zip(targets, results):
            if not delivered:
                self.unsubscribe(subscriber_id)
        return sum(results)

    async def _deliver(self, subscriber_id: str, subscriber: Subscriber, event: str, message: dict) -> bool:
        try:
            await asyncio.wait_for(subscriber.send_json(message), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning("relay.send_timeout", subscriber_id=subscriber_id, relay_event=event)
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning("relay.send_failed", subscriber_id=subscriber_id, relay_event=event, error=str(exc))
            return False
        return True

    async def handle_message(self, subscriber: Subscriber, message: Any) -> None:
        """Dispatch one inbound client frame of shape ``{"event": ..., "data": {...}}``."""
        if not isinstance(message, dict) or not isinstance(message.get("event"), str):
            logger.warning("relay.malformed_message", message=message)
            return

        event = message["event"]
        data = message.get("data")
        if not isinstance(data, dict):
            data = {}

        handler = self._control_handlers.get(event)
        if handler is None:
            logger.warning("relay.unknown_event", relay_event=event)
            return

        RELAY_CONTROL_MESSAGES.labels(event=event).inc()
        await handler(event, data, subscriber)

    # Control messages are owned by the external agent runtime; the relay only records them.

    async def _on_agent_restart(self, event: str, data: dict, subscriber: Subscriber) -> None:
        agent_id = data.get("agentId")
        logger.info("relay.agent_restart", agent_id=agent_id)
        await subscriber.send_json(frame("agent:restarted", {"agentId": agent_id, "success": True}))

    async def _on_agent_disable(self, event: str, data: dict, subscriber: Subscriber) -> None:
        logger.info("relay.agent_disable", agent_id=data.get("agentId"), disabled=data.get("disabled"))

    async def _on_agent_update_prompt(self, event: str, data: dict, subscriber: Subscriber) -> None:
        logger.info("relay.agent_update_prompt", agent_id=data.get("agentId"))

    async def _on_agent_clear_workspace(self, event: str, data: dict, subscriber: Subscriber) -> None:
        logger.info("relay.agent_clear_workspace", agent_id=data.get("agentId"))


relay = EventRelay()
