from .user import User
from .person import Person, PERSON_TYPES
from .package import PackageEntry
from .daily_entry import DailyEntry, ENTRY_TYPES
from .activity_log import ActivityLog
from .attachment import Attachment
from .daily_log import DailyLog
from .report import ReportRecord
from .audit_log import AuditLog

__all__ = ["User", "Person", "PERSON_TYPES", "PackageEntry", "DailyEntry", "ENTRY_TYPES", "ActivityLog", "Attachment", "DailyLog", "ReportRecord", "AuditLog"]
