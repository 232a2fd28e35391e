"""Demo data for a fresh dashboard database."""
from __future__ import annotations

from datetime import datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.db.codec import dump_json
from dashboard_api.models import Agent, Communication, ModelUsage, ProductWorkflow, SystemHealth, Task
from dashboard_api.models.workflow import initial_stage_results

logger = structlog.get_logger(__name__)

PRIMARY_MODEL = "minimax-portal/MiniMax-M2.5"
FALLBACK_MODEL = "minimax-portal/MiniMax-M2"

SEED_AGENTS = [
    {"name": "Trends Scout", "role": "Product Research", "emoji": "🔍", "status": "running",
     "total_tasks": 45, "total_calls": 123, "total_tokens": 45000, "active": True},
    {"name": "Supplier Intel", "role": "Supplier Analysis", "emoji": "📦", "status": "idle",
     "total_tasks": 32, "total_calls": 89, "total_tokens": 28000, "active": False},
    {"name": "Risk Model", "role": "Risk Assessment", "emoji": "⚖️", "status": "running",
     "total_tasks": 28, "total_calls": 67, "total_tokens": 19000, "active": True, "fallback": FALLBACK_MODEL},
    {"name": "Validator", "role": "Product Validation", "emoji": "✅", "status": "idle",
     "total_tasks": 56, "total_calls": 145, "total_tokens": 52000, "active": False},
    {"name": "Content Creator", "role": "Listing Content", "emoji": "✍️", "status": "running",
     "total_tasks": 89, "total_calls": 234, "total_tokens": 87000, "active": True},
]


async def seed_database(session: AsyncSession) -> dict[str, int]:
    """Insert the sample agents, tasks, usage, health and workflow rows. Returns per-table counts."""
    now = datetime.utcnow()
    agents = []
    for entry in SEED_AGENTS:
        agent = Agent(
            name=entry["name"],
            role=entry["role"],
            emoji=entry["emoji"],
            status=entry["status"],
            skills=dump_json([]),
            authorities=dump_json([]),
            model_primary=PRIMARY_MODEL,
            model_fallback=entry.get("fallback"),
            total_tasks=entry["total_tasks"],
            total_calls=entry["total_calls"],
            total_tokens=entry["total_tokens"],
            last_active=now if entry["active"] else None,
        )
        session.add(agent)
        agents.append(agent)
    await session.flush()

    scout, supplier, risk = agents[0], agents[1], agents[2]
    trends_task = Task(
        agent_id=scout.id,
        type="trends",
        status="completed",
        stage="trends",
        stage_result="pass",
        product_id="prod_001",
        input_summary="Analyzed trending products in home & garden",
        output_summary="Found 15 potential products",
        started_at=now - timedelta(hours=1),
        completed_at=now - timedelta(minutes=50),
    )
    supplier_task = Task(
        agent_id=supplier.id,
        type="supplier_intel",
        status="running",
        stage="supplier_intel",
        product_id="prod_001",
        input_summary="Finding suppliers for product",
        started_at=now - timedelta(minutes=30),
    )
    session.add_all([trends_task, supplier_task])
    await session.flush()

    usages = [
        ModelUsage(agent_id=scout.id, model_name=PRIMARY_MODEL, tokens_used=4500, latency=1250),
        ModelUsage(agent_id=risk.id, model_name=PRIMARY_MODEL, tokens_used=3200, latency=980),
        ModelUsage(agent_id=risk.id, model_name=FALLBACK_MODEL, tokens_used=2100, latency=1430, fallback_used=True),
    ]
    session.add_all(usages)
    session.add(
        Communication(
            from_agent_id=scout.id,
            to_agent_id=supplier.id,
            message="15 candidate products ready for supplier lookup",
            task_id=trends_task.id,
            status="delivered",
        )
    )
    session.add(SystemHealth(metric="gateway_status", status="healthy", details="All systems operational"))

    stage_results = initial_stage_results()
    stage_results["trends"] = "pass"
    session.add(
        ProductWorkflow(
            product_id="prod_001",
            product_name="Self-watering planter",
            current_stage="supplier_intel",
            stage_results=dump_json(stage_results),
            status="active",
        )
    )
    await session.commit()

    counts = {"agents": len(agents), "tasks": 2, "model_usages": len(usages), "communications": 1, "workflows": 1}
    logger.info("seed.done", **counts)
    return counts
