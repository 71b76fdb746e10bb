"""Shared FastAPI dependencies."""

from fastapi import Request

from workflow_intelligence.services.engine import WorkflowPredictionEngine


def get_engine(request: Request) -> WorkflowPredictionEngine:
    """Return the engine attached to the running application."""

    return request.app.state.engine
