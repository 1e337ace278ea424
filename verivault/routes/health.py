"""
Health check endpoints for monitoring and load balancers
"""
from flask import Blueprint, jsonify, current_app

from verivault.config import get_env_name
from verivault.utils.timeutil import now_iso

health_bp = Blueprint('health', __name__, url_prefix='/api/health')


@health_bp.route('', methods=['GET'])
def health_check():
    """Basic health check"""
    return jsonify({
        'status': 'OK',
        'message': 'VeriVault API is running',
        'timestamp': now_iso(),
        'environment': get_env_name(),
        'version': current_app.config['SYSTEM_VERSION']
    }), 200


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    """Liveness check for containers"""
    return jsonify({
        'status': 'alive',
        'timestamp': now_iso()
    }), 200
