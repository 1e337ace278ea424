"""
Daily Log Model
A PIN-verified end-of-shift log with its activity lists and attachments
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from verivault.rendering.documents import as_dict, as_list
from verivault.utils.timeutil import now_iso

from .attachment import Attachment


@dataclass
class DailyLog:
    submission_id: str
    verification_data: Dict[str, Any]
    report_date: Optional[str] = None
    shift_period: Optional[str] = None
    officer_name: Optional[str] = None
    weather_conditions: Optional[str] = None
    vendors: List[Dict[str, Any]] = field(default_factory=list)
    guests: List[Dict[str, Any]] = field(default_factory=list)
    packages: List[Dict[str, Any]] = field(default_factory=list)
    patrol_rounds: List[Dict[str, Any]] = field(default_factory=list)
    patrol_observations: str = ''
    equipment_status: Dict[str, Any] = field(default_factory=dict)
    general_notes: str = ''
    attachments: List[Attachment] = field(default_factory=list)
    submitted_at: str = field(default_factory=now_iso)
    submitted_by: str = 'admin'
    report_type: str = 'Daily Log'
    id: Optional[int] = None

    @classmethod
    def from_form(cls, submission_id, form, verification_data, attachments, submitted_by):
        """Build a log from the submitted form payload"""
        return cls(
            submission_id=submission_id,
            verification_data=verification_data,
            report_date=form.get('reportDate'),
            shift_period=form.get('shiftPeriod'),
            officer_name=form.get('officerName'),
            weather_conditions=form.get('weatherConditions'),
            vendors=as_list(form.get('vendors')),
            guests=as_list(form.get('guests')),
            packages=as_list(form.get('packages')),
            patrol_rounds=as_list(form.get('patrolRounds')),
            patrol_observations=form.get('patrolObservations') or '',
            equipment_status=as_dict(form.get('equipmentStatus')),
            general_notes=form.get('generalNotes') or '',
            attachments=list(attachments),
            submitted_by=submitted_by,
        )

    @property
    def summary(self):
        rounds_completed = len([r for r in as_list(self.patrol_rounds) if isinstance(r, dict) and r.get('time')])
        equipment_issues = len([s for s in as_dict(self.equipment_status).values() if s != 'ok'])
        return {
            'totalVendors': len(as_list(self.vendors)),
            'totalGuests': len(as_list(self.guests)),
            'totalPackages': len(as_list(self.packages)),
            'totalAttachments': len(self.attachments),
            'patrolRoundsCompleted': rounds_completed,
            'equipmentIssues': equipment_issues,
        }

    def to_summary_dict(self):
        """Listing view"""
        return {
            'id': self.id,
            'submissionId': self.submission_id,
            'reportDate': self.report_date,
            'shiftPeriod': self.shift_period,
            'officerName': self.officer_name,
            'summary': self.summary,
            'submittedAt': self.submitted_at,
            'submittedBy': self.submitted_by,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'submissionId': self.submission_id,
            'reportType': self.report_type,
            'reportDate': self.report_date,
            'shiftPeriod': self.shift_period,
            'officerName': self.officer_name,
            'weatherConditions': self.weather_conditions,
            'vendors': self.vendors,
            'guests': self.guests,
            'packages': self.packages,
            'patrolRounds': self.patrol_rounds,
            'patrolObservations': self.patrol_observations,
            'equipmentStatus': self.equipment_status,
            'generalNotes': self.general_notes,
            'attachments': [a.to_dict() for a in self.attachments],
            'verificationData': self.verification_data,
            'submittedAt': self.submitted_at,
            'submittedBy': self.submitted_by,
            'summary': self.summary,
        }
