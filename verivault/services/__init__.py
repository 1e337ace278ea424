from .pin_service import (
    verify_pin,
    update_pin,
    redeem,
)

from .report_service import (
    submit_report,
    generate_with_watermark,
    get_report_by_id,
    get_report_by_submission_id,
    list_reports,
    delete_report,
)

from .daily_log_service import (
    submit_daily_log,
    list_daily_logs,
    get_daily_log,
    get_daily_log_by_submission_id,
    delete_daily_log,
    get_stats_summary,
)

from .llm_service import LLMAnalysisService
from .print_service import render_printable_report

__all__ = [
    # PIN Services
    "verify_pin",
    "update_pin",
    "redeem",
    # Report Services
    "submit_report",
    "generate_with_watermark",
    "get_report_by_id",
    "get_report_by_submission_id",
    "list_reports",
    "delete_report",
    # Daily Log Services
    "submit_daily_log",
    "list_daily_logs",
    "get_daily_log",
    "get_daily_log_by_submission_id",
    "delete_daily_log",
    "get_stats_summary",
    # Function Services
    "LLMAnalysisService",
    "render_printable_report",
]
