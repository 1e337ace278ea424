"""
Activity Log API Routes
The general activity feed; daily log submissions post here too
"""
import logging

from flask import Blueprint, request, jsonify, current_app

from verivault.models import ActivityLog
from verivault.stores import get_stores
from verivault.utils.decorators import get_current_username
from verivault.utils.timeutil import now_iso

logger = logging.getLogger(__name__)

logs_bp = Blueprint('logs', __name__, url_prefix='/api/logs')


@logs_bp.route('', methods=['GET'])
def list_logs():
    logs = sorted(get_stores().activity_logs.all(), key=lambda log: (log.timestamp, log.id), reverse=True)
    return jsonify({
        'success': True,
        'logs': [log.to_dict() for log in logs],
        'total': len(logs)
    })


@logs_bp.route('', methods=['POST'])
def create_log():
    try:
        data = request.get_json(silent=True) or {}
        log = get_stores().activity_logs.add(ActivityLog(
            category=data.get('category'),
            timestamp=data.get('timestamp') or now_iso(),
            location=data.get('location'),
            subject=data.get('subject'),
            action=data.get('action'),
            priority=data.get('priority') or 'low',
            notes=data.get('notes'),
            created_by=get_current_username(),
        ))
        return jsonify({
            'success': True,
            'message': 'Log entry created successfully',
            'log': log.to_dict()
        }), 201

    except Exception as e:
        logger.error(f"Error creating log entry: {e}", exc_info=True)
        error_msg = 'Failed to create log entry' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@logs_bp.route('/<int:log_id>', methods=['GET'])
def get_log(log_id):
    log = get_stores().activity_logs.get(log_id)
    if not log:
        return jsonify({'success': False, 'message': 'Log entry not found'}), 404
    return jsonify({'success': True, 'log': log.to_dict()})


@logs_bp.route('/<int:log_id>', methods=['PUT'])
def update_log(log_id):
    data = request.get_json(silent=True) or {}
    changes = dict(data)
    changes['updatedAt'] = now_iso()
    changes['updatedBy'] = get_current_username()

    log = get_stores().activity_logs.update(log_id, changes)
    if not log:
        return jsonify({'success': False, 'message': 'Log entry not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Log entry updated successfully',
        'log': log.to_dict()
    })


@logs_bp.route('/<int:log_id>', methods=['DELETE'])
def delete_log(log_id):
    log = get_stores().activity_logs.delete(log_id)
    if not log:
        return jsonify({'success': False, 'message': 'Log entry not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Log entry deleted successfully',
        'deletedLog': log.to_dict()
    })
