"""Durable storage capability for prediction history entries."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from workflow_intelligence.models.prediction_history import PredictionHistoryLink, PredictionHistoryRecord
from workflow_intelligence.schemas.prediction import PredictionHistoryEntry


class HistoryStoreInterface(ABC):
    """Put/get capability injected into the prediction history."""

    @abstractmethod
    def put(self, entry: PredictionHistoryEntry) -> None:
        """Insert or replace one entry."""

    @abstractmethod
    def get(self, prediction_id: str) -> PredictionHistoryEntry | None:
        """Return the entry that issued ``prediction_id``, if any."""


class SqlHistoryStore(HistoryStoreInterface):
    """SQLAlchemy-backed history store; one session per call."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def put(self, entry: PredictionHistoryEntry) -> None:
        with self.session_factory() as db:
            record = db.scalar(select(PredictionHistoryRecord).where(PredictionHistoryRecord.entry_id == entry.entry_id))
            if record is None:
                record = PredictionHistoryRecord(entry_id=entry.entry_id, issued_at=entry.timestamp)
                db.add(record)
            record.payload_json = entry.model_dump(mode="json")
            record.actual_action = entry.actual_action
            record.accuracy = entry.accuracy
            db.flush()

            db.execute(delete(PredictionHistoryLink).where(PredictionHistoryLink.history_record_id == record.id))
            db.add_all(
                [
                    PredictionHistoryLink(prediction_id=prediction.id, history_record_id=record.id)
                    for prediction in entry.predictions
                ]
            )
            db.commit()

    def get(self, prediction_id: str) -> PredictionHistoryEntry | None:
        with self.session_factory() as db:
            record = db.scalar(
                select(PredictionHistoryRecord)
                .join(PredictionHistoryLink, PredictionHistoryLink.history_record_id == PredictionHistoryRecord.id)
                .where(PredictionHistoryLink.prediction_id == prediction_id)
            )
            if record is None:
                return None
            return PredictionHistoryEntry.model_validate(record.payload_json)
