"""
Repository interfaces
Route handlers and services only talk to these; the in-memory lists behind
them can be swapped for a persistent backend.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """Collection of records addressed by integer id"""

    @abstractmethod
    def add(self, record: T) -> T:
        """Store a record, assigning its id"""

    @abstractmethod
    def get(self, record_id: Any) -> Optional[T]:
        """Record by id, or None"""

    @abstractmethod
    def all(self) -> List[T]:
        """Snapshot of every record in insertion order"""

    @abstractmethod
    def update(self, record_id: Any, changes: Dict[str, Any]) -> Optional[T]:
        """Shallow-merge an API payload onto a record"""

    @abstractmethod
    def delete(self, record_id: Any) -> Optional[T]:
        """Remove and return a record, or None if it does not exist"""

    @abstractmethod
    def clear(self) -> None:
        """Drop every record"""

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        return [record for record in self.all() if predicate(record)]

    def first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for record in self.all():
            if predicate(record):
                return record
        return None

    def count(self) -> int:
        return len(self.all())


class ReportStore(Repository[T]):
    """Repository of submissions addressable by submission id"""

    def get_by_submission_id(self, submission_id: str) -> Optional[T]:
        return self.first(lambda record: record.submission_id == submission_id)
