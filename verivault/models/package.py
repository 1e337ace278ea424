from dataclasses import dataclass, field
from typing import Optional

from verivault.utils.timeutil import now_iso

from .base import RecordMixin


@dataclass
class PackageEntry(RecordMixin):
    """Package received at the front desk"""
    recipient_first_name: str
    recipient_last_name: str
    sender_name: Optional[str] = None
    sender_company: Optional[str] = None
    tracking_last_four: Optional[str] = None
    package_type: str = 'Box'
    placement_location: Optional[str] = None
    timestamp: str = field(default_factory=now_iso)
    entered_by: str = 'unknown'
    id: Optional[int] = None

    def to_dict(self):
        return {
            'id': self.id,
            'recipientFirstName': self.recipient_first_name,
            'recipientLastName': self.recipient_last_name,
            'senderName': self.sender_name,
            'senderCompany': self.sender_company,
            'trackingLastFour': self.tracking_last_four,
            'packageType': self.package_type,
            'placementLocation': self.placement_location,
            'timestamp': self.timestamp,
            'enteredBy': self.entered_by,
        }
