"""
Packages API Routes
Front-desk package intake; every package also lands in the daily entries
"""
import logging

from flask import Blueprint, request, jsonify, current_app

from verivault.models import DailyEntry, PackageEntry
from verivault.stores import get_stores
from verivault.utils.decorators import get_current_username

logger = logging.getLogger(__name__)

packages_bp = Blueprint('packages', __name__, url_prefix='/api/packages')


@packages_bp.route('', methods=['POST'])
def create_package():
    """
    Log a received package

    Body:
        recipientFirstName, recipientLastName (required), senderName,
        senderCompany, trackingLastFour, packageType, placementLocation
    """
    try:
        data = request.get_json(silent=True) or {}
        if not data.get('recipientFirstName') or not data.get('recipientLastName'):
            return jsonify({
                'success': False,
                'message': 'Recipient first and last name are required'
            }), 400

        stores = get_stores()
        entered_by = data.get('enteredBy') or get_current_username(default='unknown')
        package = stores.packages.add(PackageEntry(
            recipient_first_name=data['recipientFirstName'],
            recipient_last_name=data['recipientLastName'],
            sender_name=data.get('senderName'),
            sender_company=data.get('senderCompany'),
            tracking_last_four=data.get('trackingLastFour'),
            package_type=data.get('packageType') or 'Box',
            placement_location=data.get('placementLocation'),
            entered_by=entered_by,
        ))

        entry = stores.daily_entries.add(DailyEntry(
            type='package',
            details=package.to_dict(),
            entered_by=entered_by,
            timestamp=package.timestamp,
        ))

        logger.info(f"Package {package.id} logged for {package.recipient_first_name} {package.recipient_last_name}")
        return jsonify({
            'success': True,
            'message': 'Package logged successfully',
            'package': package.to_dict(),
            'entry': entry.to_dict()
        }), 201

    except Exception as e:
        logger.error(f"Error logging package: {e}", exc_info=True)
        error_msg = 'Failed to log package' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500


@packages_bp.route('', methods=['GET'])
def list_packages():
    """Packages newest first, optionally for one date (YYYY-MM-DD)"""
    date = request.args.get('date')
    packages = get_stores().packages.all()
    if date:
        packages = [p for p in packages if p.timestamp.startswith(date)]
    packages.sort(key=lambda p: (p.timestamp, p.id), reverse=True)

    return jsonify({
        'success': True,
        'packages': [p.to_dict() for p in packages],
        'total': len(packages)
    })
