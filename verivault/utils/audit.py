"""
Audit logging: submissions, deletions, PIN changes.
"""
import logging
from typing import Any, Optional

from verivault.models import AuditLog
from verivault.stores import get_stores

logger = logging.getLogger(__name__)


def log_audit(
    entity_type: str,
    action: str,
    user_id: Optional[Any] = None,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """Append an audit log entry."""
    try:
        entry = AuditLog(
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            action=action,
            user_id=str(user_id) if user_id is not None else None,
            details=details,
        )
        get_stores().audit_logs.add(entry)
        logger.info(f"Audit: {entity_type}/{entry.entity_id} {action} by {entry.user_id}")
    except Exception as e:
        logger.warning("Audit log failed: %s", e)
