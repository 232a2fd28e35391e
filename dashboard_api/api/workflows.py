"""Per-product workflow projections across the fixed stage pipeline."""
import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dashboard_api.api.errors import not_found, store_errors
from dashboard_api.db.codec import dump_json, load_json_object
from dashboard_api.db.session import get_session
from dashboard_api.models.workflow import FIRST_STAGE, ProductWorkflow, initial_stage_results
from dashboard_api.realtime import WORKFLOW_UPDATE, relay
from dashboard_api.schemas.workflow import WorkflowCreate, WorkflowRead, WorkflowUpdate

logger = structlog.get_logger(__name__)

router = APIRouter()

NULLABLE_FIELDS = ("bottleneck", "experiment_id")


@router.get("", response_model=list[WorkflowRead])
async def list_workflows(
    workflow_status: str | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1),
    session: AsyncSession = Depends(get_session),
) -> list[WorkflowRead]:
    query = select(ProductWorkflow)
    if workflow_status:
        query = query.where(ProductWorkflow.status == workflow_status)

    async with store_errors("Failed to fetch workflows"):
        result = await session.execute(query.order_by(ProductWorkflow.updated_at.desc()).limit(limit))
        return [WorkflowRead.model_validate(workflow) for workflow in result.scalars().all()]


@router.post("", response_model=WorkflowRead, status_code=status.HTTP_201_CREATED)
async def create_workflow(payload: WorkflowCreate, session: AsyncSession = Depends(get_session)) -> WorkflowRead:
    async with store_errors("Failed to create workflow"):
        workflow = ProductWorkflow(
            product_id=payload.product_id,
            product_name=payload.product_name,
            current_stage=FIRST_STAGE,
            stage_results=dump_json(initial_stage_results()),
            status="active",
        )
        session.add(workflow)
        await session.commit()
        await session.refresh(workflow)

    created = WorkflowRead.model_validate(workflow)
    logger.info("workflows.create", workflow_id=created.id, product_id=created.product_id)
    await relay.publish(WORKFLOW_UPDATE, created.as_event())
    return created


@router.get("/{workflow_id}", response_model=WorkflowRead)
async def get_workflow(workflow_id: str, session: AsyncSession = Depends(get_session)) -> WorkflowRead:
    async with store_errors("Failed to fetch workflow"):
        workflow = await session.get(ProductWorkflow, workflow_id)
        if not workflow:
            raise not_found("Workflow")
        return WorkflowRead.model_validate(workflow)


@router.patch("/{workflow_id}", response_model=WorkflowRead)
async def update_workflow(
    workflow_id: str, payload: WorkflowUpdate, session: AsyncSession = Depends(get_session)
) -> WorkflowRead:
    """Apply stage progress reported by the agent pipeline.

    ``stageResults`` is merged stage by stage; stages absent from the body keep
    their stored result.
    """
    async with store_errors("Failed to update workflow"):
        workflow = await session.get(ProductWorkflow, workflow_id)
        if not workflow:
            raise not_found("Workflow")

        changes = payload.model_dump(exclude_unset=True)
        stage_results = changes.pop("stage_results", None)
        if stage_results:
            merged = load_json_object(workflow.stage_results)
            merged.update(stage_results)
            workflow.stage_results = dump_json(merged)
        for field, value in changes.items():
            if field in NULLABLE_FIELDS or value is not None:
                setattr(workflow, field, value)
        await session.commit()
        await session.refresh(workflow)

    updated = WorkflowRead.model_validate(workflow)
    await relay.publish(WORKFLOW_UPDATE, updated.as_event())
    return updated
