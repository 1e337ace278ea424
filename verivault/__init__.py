from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from .extensions import bcrypt, jwt
import logging
import os

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """JSON error responses: {success: false, message}"""
    from .errors import VeriVaultError

    @app.errorhandler(VeriVaultError)
    def handle_verivault_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.__class__.__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'message': 'Route not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'message': 'Method not allowed'
        }), 405

    @app.errorhandler(413)
    def request_too_large(error):
        return jsonify({
            'success': False,
            'message': 'Request too large'
        }), 413

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal Server Error: {error}", exc_info=True)
        return jsonify({
            'success': False,
            'message': 'Internal server error'
        }), 500

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({
                'success': False,
                'message': e.description
            }), e.code
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        error_msg = 'Internal server error' if not app.debug else str(e)
        return jsonify({
            'success': False,
            'message': error_msg
        }), 500


def register_jwt_handlers():
    """Token failures answered in the API's error shape"""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'success': False, 'message': 'Authentication required'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'success': False, 'message': 'Invalid token'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'success': False, 'message': 'Token has expired'}), 401


def setup_file_logging(app):
    from logging.handlers import RotatingFileHandler

    log_file = app.config['LOG_FILE']
    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10240000,
        backupCount=10
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    file_handler.setLevel(logging.INFO)
    app.logger.addHandler(file_handler)
    logging.getLogger('verivault').addHandler(file_handler)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.info('Application startup')


def create_app(config_name=None, stores=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    if config_name:
        from verivault.config import config
        app.config.from_object(config.get(config_name, config['default']))
    else:
        from verivault.config import get_config
        app.config.from_object(get_config())

    # Ensure production mode if FLASK_ENV is production
    from verivault.config import get_env_name
    if get_env_name() == 'production' and not app.config.get('TESTING'):
        app.config['DEBUG'] = False

    # Initialize extensions
    bcrypt.init_app(app)
    jwt.init_app(app)
    register_jwt_handlers()

    # Initialize CORS
    from verivault.utils.cors import init_cors
    init_cors(app)

    register_error_handlers(app)

    # Setup logging
    if not app.debug:
        setup_file_logging(app)

    from verivault.middleware import setup_middleware
    setup_middleware(app)

    # Storage directories
    for folder in (app.config['UPLOAD_FOLDER'], app.config['REPORTS_PATH']):
        os.makedirs(folder, exist_ok=True, mode=0o755)

    # Stores and seed data
    from verivault.stores import init_stores
    from verivault.seeds import seed_defaults
    app_stores = init_stores(app, stores)
    seed_defaults(app_stores)

    # Register blueprints
    from .routes import (
        auth_bp, people_bp, packages_bp, daily_entries_bp, daily_logs_bp,
        logs_bp, reports_bp, functions_bp, health_bp,
    )
    app.register_blueprint(health_bp)  # Register health check first
    app.register_blueprint(auth_bp)
    app.register_blueprint(people_bp)
    app.register_blueprint(packages_bp)
    app.register_blueprint(daily_entries_bp)
    app.register_blueprint(daily_logs_bp)
    app.register_blueprint(logs_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(functions_bp)

    logger.info(f"VeriVault {app.config['SYSTEM_VERSION']} ready ({get_env_name()})")
    return app
