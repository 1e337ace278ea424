"""
Daily Entries API Routes
Guest, vendor, package and note rows of the running shift log
"""
import logging

from flask import Blueprint, request, jsonify, current_app

from verivault.models import DailyEntry, ENTRY_TYPES
from verivault.stores import get_stores
from verivault.utils.timeutil import now_iso, parse_iso, today_str

logger = logging.getLogger(__name__)

daily_entries_bp = Blueprint('daily_entries', __name__, url_prefix='/api/daily-entries')


def _newest_first(entries):
    return sorted(entries, key=lambda e: (e.timestamp, e.id), reverse=True)


@daily_entries_bp.route('/today', methods=['GET'])
def todays_entries():
    today = today_str()
    entries = _newest_first(get_stores().daily_entries.find(lambda e: e.timestamp.startswith(today)))
    return jsonify({
        'success': True,
        'entries': [e.to_dict() for e in entries],
        'total': len(entries),
        'date': today
    })


@daily_entries_bp.route('', methods=['GET'])
def list_entries():
    """
    List entries

    Query params:
        date: YYYY-MM-DD
        type: guest, vendor, package, note or all
        limit: default 50
        offset: default 0
    """
    try:
        date = request.args.get('date')
        entry_type = request.args.get('type')
        limit = request.args.get('limit', 50, type=int)
        offset = request.args.get('offset', 0, type=int)

        entries = get_stores().daily_entries.all()
        if date:
            entries = [e for e in entries if e.timestamp.startswith(date)]
        if entry_type and entry_type != 'all':
            entries = [e for e in entries if e.type == entry_type]
        entries = _newest_first(entries)

        return jsonify({
            'success': True,
            'entries': [e.to_dict() for e in entries[offset:offset + limit]],
            'total': len(entries),
            'limit': limit,
            'offset': offset
        })

    except Exception as e:
        logger.error(f"Error listing daily entries: {e}", exc_info=True)
        error_msg = 'Failed to list entries' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@daily_entries_bp.route('', methods=['POST'])
def create_entry():
    data = request.get_json(silent=True) or {}
    entry_type = data.get('type')
    details = data.get('details')
    entered_by = data.get('enteredBy')

    if not entry_type or not details or not entered_by:
        return jsonify({
            'success': False,
            'message': 'Type, details, and enteredBy are required'
        }), 400

    if entry_type not in ENTRY_TYPES:
        return jsonify({
            'success': False,
            'message': f'Invalid type. Must be one of: {", ".join(ENTRY_TYPES)}'
        }), 400

    entry = get_stores().daily_entries.add(DailyEntry(
        type=entry_type,
        details=details,
        entered_by=entered_by,
    ))
    return jsonify({
        'success': True,
        'message': 'Daily entry added successfully',
        'entry': entry.to_dict()
    }), 201


@daily_entries_bp.route('/<int:entry_id>', methods=['GET'])
def get_entry(entry_id):
    entry = get_stores().daily_entries.get(entry_id)
    if not entry:
        return jsonify({'success': False, 'message': 'Entry not found'}), 404
    return jsonify({'success': True, 'entry': entry.to_dict()})


@daily_entries_bp.route('/<int:entry_id>', methods=['PUT'])
def update_entry(entry_id):
    data = request.get_json(silent=True) or {}
    if data.get('type') and data['type'] not in ENTRY_TYPES:
        return jsonify({
            'success': False,
            'message': f'Invalid type. Must be one of: {", ".join(ENTRY_TYPES)}'
        }), 400

    changes = dict(data)
    changes['updatedAt'] = now_iso()
    entry = get_stores().daily_entries.update(entry_id, changes)
    if not entry:
        return jsonify({'success': False, 'message': 'Entry not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Entry updated successfully',
        'entry': entry.to_dict()
    })


@daily_entries_bp.route('/<int:entry_id>', methods=['DELETE'])
def delete_entry(entry_id):
    entry = get_stores().daily_entries.delete(entry_id)
    if not entry:
        return jsonify({'success': False, 'message': 'Entry not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Entry deleted successfully',
        'deletedEntry': entry.to_dict()
    })


@daily_entries_bp.route('/stats/daily', methods=['GET'])
def daily_stats():
    """Counts per type and per hour (UTC) for today"""
    today = today_str()
    entries = get_stores().daily_entries.find(lambda e: e.timestamp.startswith(today))

    by_hour = {}
    for entry in entries:
        stamp = parse_iso(entry.timestamp)
        if stamp:
            by_hour[stamp.hour] = by_hour.get(stamp.hour, 0) + 1

    return jsonify({
        'success': True,
        'stats': {
            'total': len(entries),
            'guests': len([e for e in entries if e.type == 'guest']),
            'vendors': len([e for e in entries if e.type == 'vendor']),
            'packages': len([e for e in entries if e.type == 'package']),
            'notes': len([e for e in entries if e.type == 'note']),
            'byHour': {str(hour): count for hour, count in sorted(by_hour.items())}
        },
        'date': today
    })
