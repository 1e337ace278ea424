"""
Daily Logs API Routes
PIN-verified end-of-shift logs with file attachments
"""
import os
import logging

from flask import Blueprint, request, jsonify, send_file, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from werkzeug.exceptions import HTTPException

from verivault.errors import VeriVaultError
from verivault.services.daily_log_service import (
    submit_daily_log,
    list_daily_logs,
    get_daily_log,
    get_daily_log_by_submission_id,
    find_attachment,
    delete_daily_log,
    get_stats_summary,
)
from verivault.utils.decorators import require_role, get_current_user
from verivault.utils.uploads import collect_uploads

logger = logging.getLogger(__name__)

daily_logs_bp = Blueprint('daily_logs', __name__, url_prefix='/api/daily-logs')


@daily_logs_bp.route('/submit', methods=['POST'])
def submit():
    """
    Submit a daily log

    Multipart form:
        formData: JSON daily log form
        verificationData: JSON PIN verification
        any number of file parts (attachments, attachment_N, ...)
    """
    try:
        user = get_current_user()
        daily_log, activity = submit_daily_log(
            form_data=request.form.get('formData'),
            verification_data=request.form.get('verificationData'),
            uploads=collect_uploads(request.files),
            submitted_by=user.username if user else None,
        )

        return jsonify({
            'success': True,
            'message': 'Daily log submitted successfully',
            'submissionId': daily_log.submission_id,
            'dailyLog': {
                'id': daily_log.id,
                'submissionId': daily_log.submission_id,
                'reportDate': daily_log.report_date,
                'officerName': daily_log.officer_name,
                'summary': daily_log.summary,
                'submittedAt': daily_log.submitted_at
            },
            'filesUploaded': len(daily_log.attachments),
            'activityLogEntry': activity.to_dict()
        }), 201

    except (VeriVaultError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"Error submitting daily log: {e}", exc_info=True)
        error_msg = 'Error processing daily log submission' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@daily_logs_bp.route('', methods=['GET'])
def list_logs():
    logs = list_daily_logs()
    return jsonify({
        'success': True,
        'dailyLogs': [log.to_summary_dict() for log in logs],
        'total': len(logs)
    })


@daily_logs_bp.route('/<int:log_id>', methods=['GET'])
def get_log(log_id):
    daily_log = get_daily_log(log_id)
    if not daily_log:
        return jsonify({'success': False, 'message': 'Daily log not found'}), 404
    return jsonify({'success': True, 'dailyLog': daily_log.to_dict()})


@daily_logs_bp.route('/submission/<submission_id>', methods=['GET'])
def get_log_by_submission(submission_id):
    daily_log = get_daily_log_by_submission_id(submission_id)
    if not daily_log:
        return jsonify({'success': False, 'message': 'Daily log not found'}), 404
    return jsonify({'success': True, 'dailyLog': daily_log.to_dict()})


@daily_logs_bp.route('/attachment/<submission_id>/<filename>', methods=['GET'])
def download_attachment(submission_id, filename):
    """Stream an attachment under its original name"""
    try:
        daily_log = get_daily_log_by_submission_id(submission_id)
        if not daily_log:
            return jsonify({'success': False, 'message': 'Daily log not found'}), 404

        attachment = find_attachment(daily_log, filename)
        if not attachment:
            return jsonify({'success': False, 'message': 'Attachment not found'}), 404

        if not os.path.exists(attachment.upload_path):
            logger.warning(f"Attachment file missing on disk: {attachment.upload_path}")
            return jsonify({'success': False, 'message': 'File not found on server'}), 404

        return send_file(
            attachment.upload_path,
            mimetype=attachment.mimetype,
            as_attachment=True,
            download_name=attachment.original_name
        )

    except Exception as e:
        logger.error(f"Error serving attachment {submission_id}/{filename}: {e}", exc_info=True)
        error_msg = 'Error retrieving attachment' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@daily_logs_bp.route('/<int:log_id>', methods=['DELETE'])
@jwt_required()
@require_role('administrator', 'manager')
def delete_log(log_id):
    daily_log = delete_daily_log(log_id, user_id=get_jwt_identity())
    if not daily_log:
        return jsonify({'success': False, 'message': 'Daily log not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Daily log deleted successfully',
        'deletedLog': daily_log.to_summary_dict()
    })


@daily_logs_bp.route('/stats/summary', methods=['GET'])
def stats_summary():
    return jsonify({
        'success': True,
        'stats': get_stats_summary()
    })
