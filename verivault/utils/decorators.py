from functools import wraps
from flask import jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from verivault.stores import get_stores


def get_current_user():
    """User behind the request's JWT, or None when no valid token was sent"""
    try:
        verify_jwt_in_request(optional=True)
        identity = get_jwt_identity()
    except Exception:
        return None
    if identity is None:
        return None
    return get_stores().users.get(identity)


def get_current_username(default='admin'):
    user = get_current_user()
    return user.username if user else default


def require_role(*roles):
    """
    Decorator to require specific roles
    Usage: @require_role('administrator', 'manager')
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            """
            Require that the current JWT-authenticated user has one of the given roles.
            Must be used together with @jwt_required() on the route.
            """
            try:
                user = get_stores().users.get(get_jwt_identity())
            except Exception:
                return jsonify({
                    'success': False,
                    'message': 'Authentication required'
                }), 401

            if not user:
                return jsonify({
                    'success': False,
                    'message': 'Authentication required'
                }), 401

            if not user.has_any_role(*roles):
                return jsonify({
                    'success': False,
                    'message': f'Permission denied. Required roles: {", ".join(roles)}'
                }), 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator
