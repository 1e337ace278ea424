"""
Report Model
Stores metadata for PIN-verified report submissions
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from verivault.utils.timeutil import now_iso

from .attachment import Attachment

# Report statuses
STATUS_GENERATING = 'generating'
STATUS_COMPLETED = 'completed'
STATUS_GENERATED = 'generated'
REPORT_STATUSES = (STATUS_GENERATING, STATUS_COMPLETED, STATUS_GENERATED)


@dataclass
class ReportRecord:
    submission_id: str
    report_type: str
    form_data: Dict[str, Any]
    verification_data: Dict[str, Any]
    attachments: List[Attachment] = field(default_factory=list)
    status: str = STATUS_GENERATING
    file_path: Optional[str] = None
    file_size: int = 0
    watermark: Optional[str] = None
    created_at: str = field(default_factory=now_iso)
    generated_by: str = 'unknown'
    id: Optional[int] = None

    @property
    def pin_verified(self):
        return isinstance(self.verification_data, dict) and self.verification_data.get('pinVerified') is True

    def to_dict(self):
        """Convert report to dictionary"""
        return {
            'id': self.id,
            'submissionId': self.submission_id,
            'reportType': self.report_type,
            'formData': self.form_data,
            'verificationData': self.verification_data,
            'attachments': [a.to_dict() for a in self.attachments],
            'status': self.status,
            'fileSize': self.file_size,
            'watermark': self.watermark,
            'createdAt': self.created_at,
            'generatedBy': self.generated_by,
        }
