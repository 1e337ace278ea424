"""
Store registry
A Stores container is attached to the app and handed to services through
get_stores(); tests and alternative backends pass their own container to
init_stores().
"""
from flask import current_app

from verivault.utils.ids import CounterIdGenerator, TimestampIdGenerator

from .base import Repository, ReportStore
from .memory import InMemoryRepository, InMemoryReportStore

EXTENSION_KEY = 'verivault.stores'


class Stores:
    """All repositories used by the API plus the submission id generators"""

    def __init__(
        self,
        users=None,
        people=None,
        packages=None,
        daily_entries=None,
        activity_logs=None,
        daily_logs=None,
        reports=None,
        audit_logs=None,
    ):
        self.users = users or InMemoryRepository()
        self.people = people or InMemoryRepository()
        self.packages = packages or InMemoryRepository()
        self.daily_entries = daily_entries or InMemoryRepository()
        self.activity_logs = activity_logs or InMemoryRepository()
        self.daily_logs = daily_logs or InMemoryReportStore()
        self.reports = reports or InMemoryReportStore()
        self.audit_logs = audit_logs or InMemoryRepository()

        # verificationHash -> verification issued by /verify-pin, removed once redeemed or expired
        self.issued_verifications = {}

        # Separate namespaces per endpoint family
        self.report_ids = CounterIdGenerator('RPT')
        self.daily_log_ids = TimestampIdGenerator('DL')
        self.watermark_ids = TimestampIdGenerator('VV')


def init_stores(app, stores=None):
    """Attach a Stores container to the app"""
    stores = stores or Stores()
    app.extensions[EXTENSION_KEY] = stores
    return stores


def get_stores() -> Stores:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "Repository",
    "ReportStore",
    "InMemoryRepository",
    "InMemoryReportStore",
    "Stores",
    "init_stores",
    "get_stores",
]
