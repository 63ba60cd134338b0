import logging
import threading
from datetime import date

from domain.models.currency import RateSnapshot

logger = logging.getLogger(__name__)


class RateStore:
    """Bounded in-memory map from calendar date to rate snapshot.

    When the bound is exceeded the chronologically oldest date key is
    evicted, regardless of when it was inserted or last read.
    """

    def __init__(self, max_size: int = 30):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._entries: dict[date, RateSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, key: date) -> RateSnapshot | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: date, snapshot: RateSnapshot) -> None:
        with self._lock:
            self._entries[key] = snapshot

            if len(self._entries) > self.max_size:
                oldest_key = min(self._entries)
                del self._entries[oldest_key]
                logger.debug(f"Evicted rates for {oldest_key.isoformat()} from cache")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def list_dates_descending(self) -> list[date]:
        with self._lock:
            return sorted(self._entries, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: date) -> bool:
        with self._lock:
            return key in self._entries
