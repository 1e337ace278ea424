"""
Reports API Routes
PIN-verified report generation, listing, downloading and management
"""
import os
import logging

from flask import Blueprint, request, jsonify, send_file, current_app, make_response
from flask_jwt_extended import jwt_required, get_jwt_identity
from werkzeug.exceptions import HTTPException

from verivault.errors import VeriVaultError
from verivault.models.report import REPORT_STATUSES
from verivault.services.report_service import (
    submit_report,
    generate_with_watermark,
    get_report_by_id,
    get_report_by_submission_id,
    list_reports,
    delete_report,
    report_download_name,
)
from verivault.utils.decorators import require_role, get_current_user
from verivault.utils.uploads import collect_uploads

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__, url_prefix='/api/reports')


@reports_bp.route('/generate', methods=['POST'])
def generate_report():
    """
    Generate a PIN-verified PDF report

    Multipart form:
        reportType: medical_incident, non_medical_incident or security_audit
        formData: JSON form payload
        verificationData: JSON PIN verification
        any number of file parts
    """
    try:
        user = get_current_user()
        record, pdf_bytes = submit_report(
            report_type=request.form.get('reportType'),
            form_data=request.form.get('formData'),
            verification_data=request.form.get('verificationData'),
            uploads=collect_uploads(request.files),
            generated_by=user.username if user else None,
        )

        response = make_response(pdf_bytes)
        response.headers['Content-Type'] = 'application/pdf'
        response.headers['Content-Disposition'] = (
            f'attachment; filename="{report_download_name(record.report_type)}"'
        )
        response.headers['X-Submission-Id'] = record.submission_id
        response.headers['X-Watermark-Hash'] = record.verification_data['verificationHash']
        return response

    except (VeriVaultError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Error generating report: {e}", exc_info=True)
        error_msg = 'Error generating report' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@reports_bp.route('/generate-with-watermark', methods=['POST'])
def generate_watermarked_report():
    """
    Generate a printable HTML report with a hidden watermark

    Body:
        reportType: report type or free-form title (required)
        reportData: form payload or {content}
        verificationData: PIN verification (required)
    """
    try:
        data = request.get_json(silent=True) or {}
        user = get_current_user()
        result = generate_with_watermark(
            report_type=data.get('reportType'),
            report_data=data.get('reportData'),
            verification_data=data.get('verificationData'),
            generated_by=user.username if user else None,
        )

        return jsonify({
            'success': True,
            'message': 'Report generated with watermark',
            'submissionId': result['submissionId'],
            'watermarkApplied': True,
            'pdfContent': result['pdfContent'],
            'reportMetadata': result['reportMetadata']
        })

    except (VeriVaultError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Error generating watermarked report: {e}", exc_info=True)
        error_msg = 'Error generating watermarked report' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@reports_bp.route('', methods=['GET'])
def list_reports_endpoint():
    """
    List reports with pagination and filters

    Query params:
        status: generating, completed or generated
        reportType: report type
        page: Page number (default: 1)
        limit: Items per page (default: 20, max: 100)
    """
    page = max(request.args.get('page', 1, type=int), 1)
    limit = min(max(request.args.get('limit', 20, type=int), 1), 100)
    status = request.args.get('status')

    if status and status not in REPORT_STATUSES:
        return jsonify({
            'success': False,
            'message': f'Invalid status. Must be one of: {", ".join(REPORT_STATUSES)}'
        }), 400

    result = list_reports(
        status=status,
        report_type=request.args.get('reportType'),
        page=page,
        limit=limit,
    )
    return jsonify({'success': True, **result})


@reports_bp.route('/<int:report_id>', methods=['GET'])
def get_report(report_id):
    report = get_report_by_id(report_id)
    if not report:
        return jsonify({'success': False, 'message': 'Report not found'}), 404
    return jsonify({'success': True, 'report': report.to_dict()})


@reports_bp.route('/submission/<submission_id>', methods=['GET'])
def get_report_by_submission(submission_id):
    report = get_report_by_submission_id(submission_id)
    if not report:
        return jsonify({'success': False, 'message': 'Report not found'}), 404
    return jsonify({'success': True, 'report': report.to_dict()})


@reports_bp.route('/<int:report_id>/download', methods=['GET'])
def download_report(report_id):
    """Download the stored PDF of a report"""
    try:
        report = get_report_by_id(report_id)
        if not report:
            return jsonify({'success': False, 'message': 'Report not found'}), 404

        if not report.file_path or not os.path.exists(report.file_path):
            return jsonify({'success': False, 'message': 'Report file not found'}), 404

        return send_file(
            report.file_path,
            mimetype='application/pdf',
            as_attachment=True,
            download_name=f"{report.submission_id}.pdf"
        )

    except Exception as e:
        logger.error(f"Error downloading report {report_id}: {e}", exc_info=True)
        error_msg = 'Failed to download report' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@reports_bp.route('/<int:report_id>', methods=['DELETE'])
@jwt_required()
@require_role('administrator', 'manager')
def delete_report_endpoint(report_id):
    if not delete_report(report_id, user_id=get_jwt_identity()):
        return jsonify({'success': False, 'message': 'Report not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Report deleted successfully'
    })
