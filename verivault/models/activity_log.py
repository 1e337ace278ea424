from dataclasses import dataclass, field
from typing import Optional

from verivault.utils.timeutil import now_iso

from .base import RecordMixin


@dataclass
class ActivityLog(RecordMixin):
    """Entry in the general activity feed (/api/logs)"""
    category: Optional[str] = None
    timestamp: str = field(default_factory=now_iso)
    location: Optional[str] = None
    subject: Optional[str] = None
    action: Optional[str] = None
    priority: str = 'low'
    notes: Optional[str] = None
    submission_id: Optional[str] = None
    created_at: str = field(default_factory=now_iso)
    created_by: str = 'admin'
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None
    id: Optional[int] = None

    READ_ONLY_FIELDS = ('id', 'created_at', 'created_by')

    def to_dict(self):
        return {
            'id': self.id,
            'category': self.category,
            'timestamp': self.timestamp,
            'location': self.location,
            'subject': self.subject,
            'action': self.action,
            'priority': self.priority,
            'notes': self.notes,
            'submissionId': self.submission_id,
            'createdAt': self.created_at,
            'createdBy': self.created_by,
            'updatedAt': self.updated_at,
            'updatedBy': self.updated_by,
        }
