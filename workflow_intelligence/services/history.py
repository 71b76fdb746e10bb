"""In-process prediction history with optional durable store."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import TypeVar

from workflow_intelligence.schemas.prediction import PredictionHistoryEntry
from workflow_intelligence.services.history_store import HistoryStoreInterface

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


class PredictionNotFoundError(LookupError):
    """Raised when feedback references a prediction id that was never issued."""

    def __init__(self, prediction_id: str) -> None:
        super().__init__(f"Prediction {prediction_id} not found in history")
        self.prediction_id = prediction_id


class PredictionHistory:
    """Append-only log of issued predictions, correlated by prediction id.

    Holds at most ``max_entries`` entries in memory, evicting the oldest. When a
    store is configured every append and update is written through, and lookups
    that miss in memory fall back to it.
    """

    def __init__(self, *, max_entries: int = 1000, store: HistoryStoreInterface | None = None) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: deque[PredictionHistoryEntry] = deque(maxlen=max_entries)
        self._store = store
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def entries(self) -> list[PredictionHistoryEntry]:
        with self._lock:
            return list(self._entries)

    def append(self, entry: PredictionHistoryEntry) -> None:
        """Record ``entry``; a failing store write leaves memory unchanged."""

        with self._lock:
            if self._store is not None:
                self._store.put(entry)
            if len(self._entries) == self._entries.maxlen:
                logger.debug("workflow.history_evicted entry_id=%s", self._entries[0].entry_id)
            self._entries.append(entry)

    def find_entry(self, prediction_id: str) -> PredictionHistoryEntry | None:
        with self._lock:
            return self._locate(prediction_id)[1]

    def update_entry(
        self,
        prediction_id: str,
        mutate: Callable[[PredictionHistoryEntry], ResultT],
    ) -> ResultT:
        """Run ``mutate`` on a copy of the entry holding ``prediction_id``.

        Raises ``PredictionNotFoundError`` before calling ``mutate`` when no entry
        contains the id. The copy replaces the held entry only after ``mutate``
        and the store write both succeed.
        """

        with self._lock:
            index, entry = self._locate(prediction_id)
            if entry is None:
                raise PredictionNotFoundError(prediction_id)
            updated = entry.model_copy(deep=True)
            result = mutate(updated)
            if self._store is not None:
                self._store.put(updated)
            if index is not None:
                self._entries[index] = updated
            return result

    def _locate(self, prediction_id: str) -> tuple[int | None, PredictionHistoryEntry | None]:
        for index, entry in enumerate(self._entries):
            if entry.find_prediction(prediction_id) is not None:
                return index, entry
        if self._store is not None:
            return None, self._store.get(prediction_id)
        return None, None
