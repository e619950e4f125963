from __future__ import annotations
import logging
import threading
from typing import Any, List, Optional
from .models import Observation, Record
from .advice import validate_observation
from .utils import to_dt, now_iso

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    In-memory record store. Records keep insertion order, which is taken as
    chronological order.
    """
    def __init__(self) -> None:
        self._records: List[Record] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def add(self, user_id: int, observation: Any, created_at: Optional[str] = None) -> Record:
        obs = validate_observation(observation)
        with self._lock:
            rec = Record(
                record_id=self._next_id,
                user_id=user_id,
                sleep_quality_score=obs.sleep_quality_score,
                concentration_score=obs.concentration_score,
                sleep_duration_hours=obs.sleep_duration_hours,
                created_at=created_at or now_iso(),
            )
            self._records.append(rec)
            self._next_id += 1
        logger.debug("Stored record %s for user %s", rec.record_id, user_id)
        return rec

    def recent(self, user_id: int, limit: int = 7) -> List[Record]:
        with self._lock:
            own = [r for r in self._records if r.user_id == user_id]
        return list(reversed(own))[:max(0, limit)]

    def history(self, user_id: int, since: Optional[str] = None) -> List[Record]:
        with self._lock:
            own = [r for r in self._records if r.user_id == user_id]
        if since:
            cutoff = to_dt(since)
            own = [r for r in own if to_dt(r.created_at) >= cutoff]
        return own

    def observations(self, user_id: int, since: Optional[str] = None) -> List[Observation]:
        return [r.observation() for r in self.history(user_id, since)]

    def latest(self, limit: int = 10) -> List[Record]:
        with self._lock:
            return list(reversed(self._records))[:max(0, limit)]

    def clear(self, user_id: Optional[int] = None) -> int:
        with self._lock:
            before = len(self._records)
            if user_id is None:
                self._records = []
            else:
                self._records = [r for r in self._records if r.user_id != user_id]
            removed = before - len(self._records)
        logger.info("Cleared %d record(s)", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

