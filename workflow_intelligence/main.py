"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI

from workflow_intelligence.config import Settings, get_settings
from workflow_intelligence.routers import predictions, workflows
from workflow_intelligence.schemas.graph import WorkflowGraph
from workflow_intelligence.services.engine import WorkflowPredictionEngine
from workflow_intelligence.services.history import PredictionHistory

logger = logging.getLogger(__name__)


def load_graph_snapshot(path: str | None) -> WorkflowGraph:
    """Read a JSON graph snapshot; a missing path yields an empty graph."""

    if not path:
        return WorkflowGraph()
    snapshot = Path(path)
    if not snapshot.exists():
        logger.warning("workflow.graph_snapshot_missing path=%s", path)
        return WorkflowGraph()
    return WorkflowGraph.model_validate_json(snapshot.read_text(encoding="utf-8"))


def build_engine(settings: Settings) -> WorkflowPredictionEngine:
    """Assemble the engine from settings, wiring the SQL history store when enabled."""

    store = None
    if settings.persist_prediction_history:
        from workflow_intelligence.db.session import SessionLocal, engine as db_engine
        from workflow_intelligence.models.base import Base
        from workflow_intelligence.services.history_store import SqlHistoryStore

        Base.metadata.create_all(db_engine)
        store = SqlHistoryStore(SessionLocal)
    graph = load_graph_snapshot(settings.graph_snapshot_path)
    logger.info(
        "workflow.engine_ready entities=%d relationships=%d persist_history=%s",
        len(graph.entities),
        len(graph.relationships),
        settings.persist_prediction_history,
    )
    return WorkflowPredictionEngine(
        graph,
        settings=settings,
        history=PredictionHistory(max_entries=settings.prediction_history_max_entries, store=store),
    )


def create_app(engine: WorkflowPredictionEngine | None = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "engine", None) is None:
            app.state.engine = build_engine(settings)
        yield

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    if engine is not None:
        app.state.engine = engine

    app.include_router(predictions.router, tags=["predictions"])
    app.include_router(workflows.router, tags=["workflows"])

    @app.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""

        return {"status": "ok"}

    return app


app = create_app()
