"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Workflow Intelligence API"
    database_url: str = "sqlite+pysqlite:///./workflow_history.db"
    persist_prediction_history: bool = False
    graph_snapshot_path: str | None = None
    default_max_predictions: int = 5
    default_min_confidence: float = 0.3
    default_max_steps: int = 6
    max_workflow_paths: int = 12
    prediction_history_max_entries: int = 1000

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
