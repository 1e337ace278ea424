"""
In-memory repositories
Data lives for the lifetime of the process and is lost on restart.
"""
import threading
from typing import Any, Dict, List, Optional

from .base import Repository, ReportStore


def _coerce_id(record_id):
    try:
        return int(record_id)
    except (TypeError, ValueError):
        return None


class InMemoryRepository(Repository):
    """
    List-backed repository with an incrementing integer id

    The lock serialises list mutations only; two requests editing the same
    record can still overwrite each other's changes.
    """

    def __init__(self, start_id: int = 1):
        self._records: List[Any] = []
        self._next_id = start_id
        self._lock = threading.RLock()

    def add(self, record):
        with self._lock:
            record.id = self._next_id
            self._next_id += 1
            self._records.append(record)
        return record

    def get(self, record_id) -> Optional[Any]:
        wanted = _coerce_id(record_id)
        if wanted is None:
            return None
        with self._lock:
            for record in self._records:
                if record.id == wanted:
                    return record
        return None

    def all(self) -> List[Any]:
        with self._lock:
            return list(self._records)

    def update(self, record_id, changes: Dict[str, Any]):
        with self._lock:
            record = self.get(record_id)
            if record is None:
                return None
            record.merge(changes)
            return record

    def delete(self, record_id):
        with self._lock:
            record = self.get(record_id)
            if record is None:
                return None
            self._records.remove(record)
            return record

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class InMemoryReportStore(InMemoryRepository, ReportStore):
    """Report and daily-log submissions"""
