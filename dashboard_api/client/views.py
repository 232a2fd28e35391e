"""Client-side search, filter and chart grouping over cached records."""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from dashboard_api.client.store import CommunicationFilter

Record = dict[str, Any]


def _matches(query: str, *values: Optional[str]) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in values if value)


def _parse_time(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def search_agents(agents: Iterable[Record], query: str) -> list[Record]:
    return [a for a in agents if _matches(query, a.get("name"), a.get("role"), a.get("modelPrimary"))]


def search_tasks(tasks: Iterable[Record], query: str) -> list[Record]:
    return [
        t
        for t in tasks
        if _matches(query, t.get("type"), t.get("stage"), t.get("inputSummary"), t.get("outputSummary"), t.get("productId"))
    ]


def search_communications(communications: Iterable[Record], query: str) -> list[Record]:
    def names(comm: Record) -> tuple[Optional[str], Optional[str]]:
        return ((comm.get("fromAgent") or {}).get("name"), (comm.get("toAgent") or {}).get("name"))

    return [c for c in communications if _matches(query, c.get("message"), *names(c))]


def filter_communications(communications: Iterable[Record], criteria: CommunicationFilter) -> list[Record]:
    """Apply the dashboard's communication filter; an agent matches either end of the message."""
    selected = []
    for comm in communications:
        if criteria.agent_id and criteria.agent_id not in (comm.get("fromAgentId"), comm.get("toAgentId")):
            continue
        if criteria.task_id and comm.get("taskId") != criteria.task_id:
            continue
        if criteria.status and comm.get("status") != criteria.status:
            continue
        if criteria.from_date or criteria.to_date:
            sent_at = _parse_time(comm.get("timestamp"))
            if sent_at is None:
                continue
            if criteria.from_date and _naive(sent_at) < _naive(criteria.from_date):
                continue
            if criteria.to_date and _naive(sent_at) > _naive(criteria.to_date):
                continue
        selected.append(comm)
    return selected


def _group_usage(usages: Iterable[Record], key: str) -> list[Record]:
    groups: dict[str, Record] = defaultdict(lambda: {"count": 0, "tokensUsed": 0, "fallbacks": 0, "failures": 0})
    for usage in usages:
        group = groups[usage.get(key)]
        group["count"] += 1
        group["tokensUsed"] += usage.get("tokensUsed") or 0
        group["fallbacks"] += 1 if usage.get("fallbackUsed") else 0
        group["failures"] += 0 if usage.get("success", True) else 1
    rows = [{key: name, **totals} for name, totals in groups.items()]
    return sorted(rows, key=lambda row: row["tokensUsed"], reverse=True)


def group_usage_by_agent(usages: Iterable[Record]) -> list[Record]:
    return _group_usage(usages, "agentId")


def group_usage_by_model(usages: Iterable[Record]) -> list[Record]:
    return _group_usage(usages, "modelName")
