from .auth import auth_bp
from .people import people_bp
from .packages import packages_bp
from .daily_entries import daily_entries_bp
from .daily_logs import daily_logs_bp
from .logs import logs_bp
from .reports import reports_bp
from .functions import functions_bp
from .health import health_bp

__all__ = ['auth_bp', 'people_bp', 'packages_bp', 'daily_entries_bp', 'daily_logs_bp', 'logs_bp', 'reports_bp', 'functions_bp', 'health_bp']
