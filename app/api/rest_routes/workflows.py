from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.collections.ai_workflow import get_ai_workflow_events, get_ai_workflow_run
from app.core.security import verify_jwt
from app.models.ai_workflow import AIWorkflowEvent, AIWorkflowRun

router = APIRouter(
    prefix="/workflows",
    tags=["AI Workflows"],
    dependencies=[Depends(verify_jwt)],
)


async def _get_own_run(workflow_id: str, user_id: str) -> AIWorkflowRun:
    run = await get_ai_workflow_run(workflow_id)
    if not run or run.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Workflow with id {workflow_id} not found.",
        )
    return run


@router.get("/{workflow_id}", response_model=AIWorkflowRun, response_model_exclude_none=True)
async def get_workflow(
    workflow_id: str,
    user_payload: dict = Depends(verify_jwt),
) -> AIWorkflowRun:
    return await _get_own_run(workflow_id, user_payload.get("sub"))


@router.get(
    "/{workflow_id}/events",
    response_model=list[AIWorkflowEvent],
    response_model_exclude_none=True,
)
async def get_workflow_events(
    workflow_id: str,
    limit: int = Query(default=100, ge=1, le=500),
    user_payload: dict = Depends(verify_jwt),
) -> list[AIWorkflowEvent]:
    """
    Step-by-step audit trail of a diagnosis, weather report, scheme advisor
    or crop snap run.
    """
    run = await _get_own_run(workflow_id, user_payload.get("sub"))
    return await get_ai_workflow_events(run.id, limit=limit)
