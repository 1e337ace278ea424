"""
Daily Log Service
End-of-shift log submission, lookups and statistics
"""
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app

from verivault.errors import MissingFieldError, VeriVaultError
from verivault.models import ActivityLog, DailyLog
from verivault.stores import get_stores
from verivault.utils.audit import log_audit
from verivault.utils.timeutil import parse_iso, today_str, utc_now
from verivault.utils.uploads import remove_files, save_uploads, validate_uploads

from .pin_service import redeem
from .report_service import check_declared_pin, parse_json_field

logger = logging.getLogger(__name__)


def build_activity_entry(daily_log: DailyLog) -> ActivityLog:
    """Feed entry announcing a submitted daily log"""
    summary = daily_log.summary
    return ActivityLog(
        category='daily-log',
        location='Security Office',
        subject=f"Daily Log - {daily_log.report_date}",
        action=f"Submitted by {daily_log.officer_name}",
        priority='low',
        notes=(
            f"{summary['totalVendors']} vendors, {summary['totalGuests']} guests, "
            f"{summary['totalPackages']} packages, {summary['totalAttachments']} files"
        ),
        submission_id=daily_log.submission_id,
        created_by=daily_log.submitted_by,
    )


def submit_daily_log(
    form_data: Any,
    verification_data: Any,
    uploads: Optional[List[Tuple[str, Any]]] = None,
    submitted_by: Optional[str] = None,
) -> Tuple[DailyLog, ActivityLog]:
    """
    Store a PIN-verified daily log with its attachments

    Returns:
        tuple: the stored DailyLog and the activity feed entry created for it
    """
    config = current_app.config
    uploads = uploads or []

    validate_uploads(uploads, config['MAX_FILE_SIZE'], config['MAX_FILES'])

    if form_data in (None, '') or verification_data in (None, ''):
        raise MissingFieldError()
    form = parse_json_field(form_data, 'formData')
    verification_input = parse_json_field(verification_data, 'verificationData')
    check_declared_pin(verification_input)
    verification = redeem(verification_input)

    stores = get_stores()
    attachments = []
    daily_log = None
    try:
        attachments = save_uploads(uploads, config['UPLOAD_FOLDER'])
        daily_log = DailyLog.from_form(
            submission_id=stores.daily_log_ids.next_id(),
            form=form,
            verification_data=verification,
            attachments=attachments,
            submitted_by=submitted_by or verification['username'],
        )
        stores.daily_logs.add(daily_log)
        activity = stores.activity_logs.add(build_activity_entry(daily_log))
    except Exception as e:
        logger.error(f"Daily log submission failed: {e}", exc_info=True)
        remove_files(a.upload_path for a in attachments)
        if daily_log is not None and daily_log.id is not None:
            stores.daily_logs.delete(daily_log.id)
        if isinstance(e, VeriVaultError):
            raise
        raise VeriVaultError('Error processing daily log submission') from e

    log_audit(
        'daily_log', 'submit',
        user_id=verification['userId'],
        entity_id=daily_log.submission_id,
        details=daily_log.summary,
    )
    logger.info(f"Daily log {daily_log.submission_id} submitted with {len(attachments)} files")
    return daily_log, activity


def list_daily_logs() -> List[DailyLog]:
    """All daily logs, newest first"""
    return sorted(get_stores().daily_logs.all(), key=lambda log: log.id, reverse=True)


def get_daily_log(log_id: Any) -> Optional[DailyLog]:
    return get_stores().daily_logs.get(log_id)


def get_daily_log_by_submission_id(submission_id: str) -> Optional[DailyLog]:
    return get_stores().daily_logs.get_by_submission_id(submission_id)


def find_attachment(daily_log: DailyLog, filename: str):
    for attachment in daily_log.attachments:
        if attachment.filename == filename:
            return attachment
    return None


def delete_daily_log(log_id: Any, user_id: Optional[Any] = None) -> Optional[DailyLog]:
    """Remove a daily log and its attachment files"""
    stores = get_stores()
    daily_log = stores.daily_logs.get(log_id)
    if not daily_log:
        return None

    remove_files(a.upload_path for a in daily_log.attachments)
    stores.daily_logs.delete(daily_log.id)
    log_audit('daily_log', 'delete', user_id=user_id, entity_id=daily_log.submission_id)
    logger.info(f"Deleted daily log: {daily_log.submission_id}")
    return daily_log


def get_stats_summary() -> Dict[str, Any]:
    logs = get_stores().daily_logs.all()
    today = today_str()
    week_ago = utc_now() - timedelta(days=7)

    this_week = 0
    for log in logs:
        submitted = parse_iso(log.submitted_at)
        if submitted and submitted >= week_ago:
            this_week += 1

    summaries = [log.summary for log in logs]
    total_rounds = sum(s['patrolRoundsCompleted'] for s in summaries)
    return {
        'totalDailyLogs': len(logs),
        'todayLogs': len([log for log in logs if (log.submitted_at or '').startswith(today)]),
        'thisWeekLogs': this_week,
        'totalVendors': sum(s['totalVendors'] for s in summaries),
        'totalGuests': sum(s['totalGuests'] for s in summaries),
        'totalPackages': sum(s['totalPackages'] for s in summaries),
        'totalEquipmentIssues': sum(s['equipmentIssues'] for s in summaries),
        'averagePatrolRounds': round(total_rounds / len(logs), 1) if logs else 0,
    }
