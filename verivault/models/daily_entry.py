from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from verivault.utils.timeutil import now_iso

from .base import RecordMixin

ENTRY_TYPES = ('guest', 'vendor', 'package', 'note')


@dataclass
class DailyEntry(RecordMixin):
    """One shift-log row: a guest, vendor, package or note event"""
    type: str
    details: Dict[str, Any]
    entered_by: str
    timestamp: str = field(default_factory=now_iso)
    updated_at: Optional[str] = None
    id: Optional[int] = None

    READ_ONLY_FIELDS = ('id', 'timestamp')

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'type': self.type,
            'details': self.details,
            'enteredBy': self.entered_by,
            'updatedAt': self.updated_at,
        }
