"""
Auth API Routes
Login, PIN verification and PIN changes
"""
from datetime import timedelta
import logging

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity

from verivault.errors import VeriVaultError
from verivault.services.pin_service import verify_pin, update_pin
from verivault.stores import get_stores

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login endpoint - checks the password and returns a JWT access token"""
    data = request.get_json(silent=True)

    if not data:
        return jsonify({
            'success': False,
            'message': 'Request body must be JSON'
        }), 400

    username = data.get('username')
    password = data.get('password')

    if not username or not password:
        return jsonify({
            'success': False,
            'message': 'Username and password required'
        }), 400

    user = get_stores().users.first(lambda u: u.username == username)

    if not user or not user.check_password(password):
        logger.warning(f"Failed login for {username}")
        return jsonify({
            'success': False,
            'message': 'Invalid credentials'
        }), 401

    # Identity must be a string for the JWT "sub" claim
    expires_hours = current_app.config['JWT_ACCESS_TOKEN_EXPIRES_HOURS']
    access_token = create_access_token(
        identity=str(user.id),
        additional_claims={
            'username': user.username,
            'role': user.role,
        },
        expires_delta=timedelta(hours=expires_hours),
    )

    logger.info(f"User {user.username} logged in")
    return jsonify({
        'success': True,
        'message': 'Login successful',
        'user': user.to_dict(),
        'token': access_token,
        'token_type': 'bearer',
        'expires_in': expires_hours * 3600
    }), 200


@auth_bp.route('/verify-pin', methods=['POST'])
def verify_pin_endpoint():
    """
    Verify a user's 4-digit PIN

    Body:
        userId: user id (required)
        pin: PIN (required)
    """
    data = request.get_json(silent=True) or {}
    verification = verify_pin(data.get('userId'), data.get('pin'))
    return jsonify({
        'success': True,
        'message': 'PIN verified successfully',
        'verificationData': verification
    }), 200


@auth_bp.route('/update-pin', methods=['POST'])
def update_pin_endpoint():
    """
    Change a user's PIN

    Body:
        userId, oldPin, newPin (all required)
    """
    data = request.get_json(silent=True) or {}
    update_pin(data.get('userId'), data.get('oldPin'), data.get('newPin'))
    return jsonify({
        'success': True,
        'message': 'PIN updated successfully'
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Stateless JWT: the client discards its token"""
    return jsonify({
        'success': True,
        'message': 'Logged out successfully'
    }), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """Current user from the JWT"""
    try:
        user = get_stores().users.get(get_jwt_identity())
        if not user:
            return jsonify({'success': False, 'message': 'User not found'}), 404

        return jsonify({
            'success': True,
            'user': user.to_dict()
        }), 200

    except VeriVaultError:
        raise
    except Exception as e:
        logger.error(f"Error loading current user: {e}", exc_info=True)
        error_msg = 'Failed to load user' if not current_app.debug else str(e)
        return jsonify({'success': False, 'message': error_msg}), 500
