"""Workflow planning and behavior learning routes."""

from fastapi import APIRouter, Depends, HTTPException, Path

from workflow_intelligence.routers.dependencies import get_engine
from workflow_intelligence.schemas.behavior import BehaviorRecord, LearningResult
from workflow_intelligence.schemas.common import ApiResponse
from workflow_intelligence.schemas.workflow import WorkflowPlan, WorkflowPlanRequest
from workflow_intelligence.services.engine import InvalidWorkflowInputError, WorkflowPredictionEngine

router = APIRouter()


@router.post("/workflows/optimal", response_model=ApiResponse[WorkflowPlan])
async def suggest_workflow(
    payload: WorkflowPlanRequest,
    engine: WorkflowPredictionEngine = Depends(get_engine),
) -> ApiResponse[WorkflowPlan]:
    """Plan steps from the start entities toward the described goal."""

    try:
        plan = await engine.suggest_optimal_workflow(
            payload.start_entity_ids,
            payload.goal_description,
            payload.options,
        )
    except InvalidWorkflowInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(data=plan)


@router.post("/behavior/{user_id}/learn", response_model=ApiResponse[LearningResult])
async def learn_behavior(
    records: list[BehaviorRecord],
    user_id: str = Path(..., min_length=1),
    engine: WorkflowPredictionEngine = Depends(get_engine),
) -> ApiResponse[LearningResult]:
    """Extract patterns and personalized recommendations from a behavior log."""

    return ApiResponse(data=await engine.learn_from_behavior(user_id, records))
