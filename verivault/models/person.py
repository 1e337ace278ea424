from dataclasses import dataclass, field
from typing import Optional

from verivault.utils.timeutil import now_iso

from .base import RecordMixin

PERSON_TYPES = ('Staff', 'Vendor', 'Guest')


@dataclass
class Person(RecordMixin):
    """Known staff member, vendor or guest"""
    first_name: str
    last_name: str
    type: str
    company: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    added_by: str = 'unknown'
    added_at: str = field(default_factory=now_iso)
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None
    id: Optional[int] = None

    READ_ONLY_FIELDS = ('id', 'added_at')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def matches(self, term):
        """Case-insensitive match on name, company or department"""
        term = term.lower()
        return (
            term in self.full_name.lower()
            or term in (self.company or '').lower()
            or term in (self.department or '').lower()
        )

    def to_dict(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'type': self.type,
            'company': self.company,
            'department': self.department,
            'phone': self.phone,
            'addedBy': self.added_by,
            'addedAt': self.added_at,
            'updatedAt': self.updated_at,
            'updatedBy': self.updated_by,
        }

    def to_search_result(self):
        """Compact shape used by the autocomplete endpoint"""
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'type': self.type,
            'company': self.company,
            'department': self.department,
            'displayName': self.full_name,
            'subtitle': self.department if self.type == 'Staff' else self.company,
        }
