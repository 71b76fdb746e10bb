"""Prediction and feedback routes."""

from fastapi import APIRouter, Body, Depends, HTTPException, Path

from workflow_intelligence.routers.dependencies import get_engine
from workflow_intelligence.schemas.common import ApiResponse
from workflow_intelligence.schemas.context import WorkflowContext
from workflow_intelligence.schemas.prediction import (
    AccuracyResult,
    FeedbackRequest,
    PredictionBundle,
    PredictionOptions,
)
from workflow_intelligence.services.engine import WorkflowPredictionEngine
from workflow_intelligence.services.history import PredictionNotFoundError

router = APIRouter(prefix="/predictions")


@router.post("", response_model=ApiResponse[PredictionBundle])
async def create_predictions(
    context: WorkflowContext = Body(...),
    options: PredictionOptions | None = Body(default=None),
    engine: WorkflowPredictionEngine = Depends(get_engine),
) -> ApiResponse[PredictionBundle]:
    """Predict next actions for the supplied workflow context."""

    return ApiResponse(data=await engine.generate_predictions(context, options))


@router.post("/{prediction_id}/feedback", response_model=ApiResponse[AccuracyResult])
async def record_feedback(
    payload: FeedbackRequest,
    prediction_id: str = Path(..., min_length=1),
    engine: WorkflowPredictionEngine = Depends(get_engine),
) -> ApiResponse[AccuracyResult]:
    """Score an issued prediction against the action the user actually took."""

    try:
        result = await engine.update_prediction_accuracy(
            prediction_id,
            payload.actual_action,
            payload.actual_entity_id,
        )
    except PredictionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Prediction not found") from exc
    return ApiResponse(data=result)
