"""Prediction history ORM models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from workflow_intelligence.models.base import Base, CreatedAtMixin, IdMixin


class PredictionHistoryRecord(Base, IdMixin, CreatedAtMixin):
    """Serialized prediction history entry."""

    __tablename__ = "prediction_history"

    entry_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payload_json: Mapped[dict[str, object]] = mapped_column(JSON, default=dict, nullable=False)
    actual_action: Mapped[str | None] = mapped_column(String(512), nullable=True)
    accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)


class PredictionHistoryLink(Base, IdMixin):
    """Maps each issued prediction id to the history entry that holds it."""

    __tablename__ = "prediction_history_links"

    prediction_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    history_record_id: Mapped[int] = mapped_column(
        ForeignKey("prediction_history.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
