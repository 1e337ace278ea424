from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from verivault.utils.timeutil import now_iso


@dataclass
class AuditLog:
    """Append-only audit trail entry"""
    entity_type: str
    action: str
    entity_id: Optional[str] = None
    user_id: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    created_at: str = field(default_factory=now_iso)
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'entityType': self.entity_type,
            'entityId': self.entity_id,
            'action': self.action,
            'userId': self.user_id,
            'details': self.details,
            'createdAt': self.created_at,
        }
