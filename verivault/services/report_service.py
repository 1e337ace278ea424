"""
Report Service
Business logic for PIN-verified report submission, rendering and management
"""
import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app

from verivault.errors import (
    InvalidPinFormatError,
    InvalidReportTypeError,
    MissingFieldError,
    RenderError,
    VeriVaultError,
)
from verivault.models import ReportRecord
from verivault.models.report import STATUS_COMPLETED, STATUS_GENERATED
from verivault.rendering import (
    REPORT_TYPES,
    HtmlReportRenderer,
    PdfReportRenderer,
    ReportDocument,
    build_sections,
    flatten_report_data,
    normalize_report_type,
)
from verivault.stores import get_stores
from verivault.utils.audit import log_audit
from verivault.utils.timeutil import now_iso, today_str
from verivault.utils.uploads import remove_files, save_uploads, validate_uploads
from verivault.utils.watermark import build_watermark

from .pin_service import is_valid_pin, redeem

logger = logging.getLogger(__name__)


def parse_json_field(value: Any, field_name: str) -> Dict[str, Any]:
    """
    Decode a JSON-encoded multipart field

    Raises:
        MissingFieldError: value is empty
        VeriVaultError: value is not a JSON object (400)
    """
    if value in (None, ''):
        raise MissingFieldError()
    if isinstance(value, dict):
        return value
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        raise VeriVaultError(f'Invalid JSON in {field_name}', status_code=400)
    if not isinstance(parsed, dict):
        raise VeriVaultError(f'Invalid JSON in {field_name}', status_code=400)
    return parsed


def check_declared_pin(verification_data: Dict[str, Any]) -> None:
    pin = verification_data.get('pin')
    if pin not in (None, '') and not is_valid_pin(str(pin)):
        raise InvalidPinFormatError()


def build_report_document(record: ReportRecord) -> ReportDocument:
    """Structured document for a stored report record"""
    verification = record.verification_data
    return ReportDocument(
        title=REPORT_TYPES[record.report_type],
        meta=[
            ('Submission ID', record.submission_id),
            ('Report Type', REPORT_TYPES[record.report_type]),
            ('Submitted', record.created_at),
            ('Verified By', str(verification.get('username') or 'N/A')),
        ],
        sections=build_sections(record.report_type, record.form_data),
        verification=verification,
        watermark=record.watermark,
        attachments=[(a.original_name, a.mimetype, a.size) for a in record.attachments],
    )


def write_report_file(record: ReportRecord, content: bytes) -> str:
    """Store rendered PDF bytes under REPORTS_PATH, returning the absolute path"""
    reports_dir = current_app.config['REPORTS_PATH']
    os.makedirs(reports_dir, exist_ok=True, mode=0o755)

    timestamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
    output_path = os.path.abspath(
        os.path.join(reports_dir, f"{record.submission_id}_{record.report_type}_{timestamp}.pdf")
    )
    with open(output_path, 'wb') as f:
        f.write(content)
    return output_path


def report_download_name(report_type: str) -> str:
    return f"{report_type}_report_{today_str()}.pdf"


def submit_report(
    report_type: Optional[str],
    form_data: Any,
    verification_data: Any,
    uploads: Optional[List[Tuple[str, Any]]] = None,
    generated_by: Optional[str] = None,
) -> Tuple[ReportRecord, bytes]:
    """
    Validate, persist and render a PIN-verified report

    Args:
        report_type: medical_incident, non_medical_incident or security_audit
        form_data: form payload (JSON string or dict)
        verification_data: PIN verification payload (JSON string or dict)
        uploads: (field name, FileStorage) pairs
        generated_by: username from the request token, if any

    Returns:
        tuple: the stored ReportRecord and the rendered PDF bytes
    """
    config = current_app.config
    uploads = uploads or []

    # Nothing is written until every file passed
    validate_uploads(uploads, config['MAX_FILE_SIZE'], config['MAX_FILES'])

    if form_data in (None, '') or verification_data in (None, ''):
        raise MissingFieldError()
    form = parse_json_field(form_data, 'formData')
    verification_input = parse_json_field(verification_data, 'verificationData')
    check_declared_pin(verification_input)

    key = normalize_report_type(report_type)
    if key is None:
        raise InvalidReportTypeError()

    verification = redeem(verification_input)

    stores = get_stores()
    attachments = []
    record = None
    pdf_path = None
    try:
        attachments = save_uploads(uploads, config['UPLOAD_FOLDER'])

        record = ReportRecord(
            submission_id=stores.report_ids.next_id(),
            report_type=key,
            form_data=form,
            verification_data=verification,
            attachments=attachments,
            generated_by=generated_by or verification['username'],
        )
        record.watermark = build_watermark(
            verification['userHash'], now_iso(), record.submission_id, config['WATERMARK_VERSION']
        )
        stores.reports.add(record)

        pdf_bytes = PdfReportRenderer().render(build_report_document(record))
        pdf_path = write_report_file(record, pdf_bytes)

        record.file_path = pdf_path
        record.file_size = len(pdf_bytes)
        record.status = STATUS_COMPLETED
    except Exception as e:
        logger.error(f"Report submission failed: {e}", exc_info=True)
        remove_files([a.upload_path for a in attachments] + [pdf_path])
        if record is not None and record.id is not None:
            stores.reports.delete(record.id)
        if isinstance(e, VeriVaultError):
            raise
        raise RenderError('Error generating report') from e

    log_audit(
        'report', 'submit',
        user_id=verification['userId'],
        entity_id=record.submission_id,
        details={'reportType': key, 'attachments': len(attachments)},
    )
    logger.info(f"Report {record.submission_id} generated: {pdf_path} ({record.file_size} bytes)")
    return record, pdf_bytes


def generate_with_watermark(
    report_type: Optional[str],
    report_data: Any,
    verification_data: Any,
    generated_by: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Render a printable HTML report carrying a hidden watermark

    Known report types render their structured sections; any other type is
    used as the title and the report data becomes the body.
    """
    if not report_type or not verification_data:
        raise MissingFieldError()

    verification = redeem(parse_json_field(verification_data, 'verificationData'))

    config = current_app.config
    stores = get_stores()
    submission_id = stores.watermark_ids.next_id()
    generated_at = now_iso()
    watermark = build_watermark(
        verification['userHash'], generated_at, submission_id, config['WATERMARK_VERSION']
    )

    key = normalize_report_type(report_type)
    document = ReportDocument(
        title=REPORT_TYPES[key] if key else str(report_type),
        meta=[
            ('Submission ID', submission_id),
            ('Generated', generated_at),
            ('Verified By', str(verification.get('username') or 'N/A')),
        ],
        verification=verification,
        watermark=watermark,
    )
    if key and isinstance(report_data, dict) and 'content' not in report_data:
        document.sections = build_sections(key, report_data)
    else:
        document.body = flatten_report_data(report_data)

    try:
        html = HtmlReportRenderer().render(document)
    except Exception as e:
        logger.error(f"Watermarked report rendering failed: {e}", exc_info=True)
        raise RenderError('Error generating watermarked report') from e

    record = ReportRecord(
        submission_id=submission_id,
        report_type=key or str(report_type),
        form_data=report_data if isinstance(report_data, dict) else {'content': report_data},
        verification_data=verification,
        status=STATUS_GENERATED,
        file_size=len(html.encode('utf-8')),
        watermark=watermark,
        created_at=generated_at,
        generated_by=generated_by or verification['username'],
    )
    stores.reports.add(record)
    log_audit('report', 'generate_watermarked', user_id=verification['userId'], entity_id=submission_id)

    return {
        'submissionId': submission_id,
        'pdfContent': html,
        'reportMetadata': {
            'type': report_type,
            'generatedAt': generated_at,
            'watermarkHash': verification['userHash'],
            'verificationHash': verification['verificationHash'],
            'submissionId': submission_id,
        },
    }


def _visible(report: Optional[ReportRecord]) -> Optional[ReportRecord]:
    # Only PIN-verified reports are served
    return report if report is not None and report.pin_verified else None


def get_report_by_id(report_id: Any) -> Optional[ReportRecord]:
    """Get report by ID"""
    return _visible(get_stores().reports.get(report_id))


def get_report_by_submission_id(submission_id: str) -> Optional[ReportRecord]:
    """Get report by submission ID"""
    return _visible(get_stores().reports.get_by_submission_id(submission_id))


def list_reports(
    status: Optional[str] = None,
    report_type: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Dict[str, Any]:
    """
    List PIN-verified reports with pagination and filters

    Returns:
        dict: Reports (newest first) and pagination info
    """
    reports = [r for r in get_stores().reports.all() if r.pin_verified]
    if status:
        reports = [r for r in reports if r.status == status]
    if report_type:
        wanted = normalize_report_type(report_type) or report_type
        reports = [r for r in reports if r.report_type == wanted]

    reports.sort(key=lambda r: r.id, reverse=True)

    page = max(page, 1)
    limit = max(limit, 1)
    total = len(reports)
    start = (page - 1) * limit
    return {
        'reports': [r.to_dict() for r in reports[start:start + limit]],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'pages': (total + limit - 1) // limit,
        },
    }


def delete_report(report_id: Any, user_id: Optional[Any] = None) -> bool:
    """Delete a report together with its PDF and attachment files"""
    stores = get_stores()
    report = stores.reports.get(report_id)
    if not report:
        return False

    remove_files([report.file_path] + [a.upload_path for a in report.attachments])
    stores.reports.delete(report.id)
    log_audit('report', 'delete', user_id=user_id, entity_id=report.submission_id)
    logger.info(f"Deleted report: {report.submission_id}")
    return True
