import os
from dotenv import load_dotenv

load_dotenv()


def get_env_name():
    """Environment name from FLASK_ENV, falling back to NODE_ENV"""
    return os.getenv('FLASK_ENV') or os.getenv('NODE_ENV') or 'development'


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES_HOURS = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES_HOURS', '8'))

    # Server
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '5000'))
    CLIENT_URL = os.getenv('CLIENT_URL')
    SYSTEM_VERSION = os.getenv('SYSTEM_VERSION', '2.0.0')

    # Storage paths
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads')
    REPORTS_PATH = os.getenv('REPORTS_PATH', 'reports')

    # Upload limits
    MAX_FILE_SIZE = int(os.getenv('MAX_FILE_SIZE', str(50 * 1024 * 1024)))  # 50MB per file
    MAX_FILES = int(os.getenv('MAX_FILES', '20'))
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(1024 * 1024 * 1024)))  # whole request

    # Watermark
    WATERMARK_VERSION = os.getenv('WATERMARK_VERSION', 'VV2.0')

    # Seconds an issued verificationHash stays redeemable
    PIN_VERIFICATION_TTL = int(os.getenv('PIN_VERIFICATION_TTL', '900'))

    # LLM analysis
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_API_URL = os.getenv('OPENAI_API_URL', 'https://api.openai.com/v1/chat/completions')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4')
    OPENAI_TIMEOUT = float(os.getenv('OPENAI_TIMEOUT', '60'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'logs/verivault.log')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Ensure SECRET_KEY is set
    SECRET_KEY = os.getenv('SECRET_KEY')
    if get_env_name() == 'production' and (not SECRET_KEY or SECRET_KEY == 'dev-secret-key-change-in-production'):
        raise ValueError("SECRET_KEY environment variable must be set in production and must not be the default value")
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY') or SECRET_KEY

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SECRET_KEY = 'testing-secret-key'
    JWT_SECRET_KEY = 'testing-jwt-secret-key-with-enough-length'
    OPENAI_API_KEY = None
    BCRYPT_LOG_ROUNDS = 4


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV / NODE_ENV"""
    return config.get(get_env_name(), config['default'])
