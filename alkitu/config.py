"""
Alkitu Site - Configuration
Environment-based configuration for different deployment stages
"""
import os
from datetime import timedelta


def _database_uri(default: str) -> str:
    """Read DATABASE_URL, rewriting postgres:// URLs for the psycopg v3 driver"""
    db_url = os.environ.get('DATABASE_URL', '')
    if not db_url:
        return default
    if db_url.startswith('postgres://'):
        db_url = db_url.replace('postgres://', 'postgresql+psycopg://', 1)
    elif db_url.startswith('postgresql://'):
        db_url = db_url.replace('postgresql://', 'postgresql+psycopg://', 1)
    return db_url


class BaseConfig:
    """Base configuration"""

    # Flask - Secret key (required in production)
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    _is_production = os.environ.get('FLASK_ENV') == 'production'
    if SECRET_KEY == 'dev-secret-key-change-in-production' and _is_production:
        import warnings
        warnings.warn("SECRET_KEY is using default dev value in production! Set SECRET_KEY env var.")

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # Public site
    SITE_URL = os.environ.get('SITE_URL', 'http://localhost:5000').rstrip('/')
    SUPPORTED_LOCALES = ('es', 'en')
    DEFAULT_LOCALE = os.environ.get('DEFAULT_LOCALE', 'es')

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return _database_uri('sqlite:///alkitu.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # JWT Auth
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get('JWT_EXPIRES_HOURS', '24')))

    # Email
    EMAIL_ENABLED = os.environ.get('EMAIL_ENABLED', 'true').lower() == 'true'
    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY', '')
    EMAIL_FROM = os.environ.get('EMAIL_FROM', 'info@alkitu.com')
    EMAIL_FROM_NAME = os.environ.get('EMAIL_FROM_NAME', 'Alkitu')
    EMAIL_DOMAIN = os.environ.get('EMAIL_DOMAIN', 'alkitu.com')
    SMTP_HOST = os.environ.get('SMTP_HOST', 'smtp.gmail.com')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', '587'))
    SMTP_USER = os.environ.get('SMTP_USER', '')
    SMTP_PASS = os.environ.get('SMTP_PASS', '')

    # Global request guard (Flask-Limiter)
    RATELIMIT_ENABLED = os.environ.get('RATE_LIMIT_ENABLED', 'true').lower() == 'true'
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', '1000 per hour')
    RATELIMIT_STORAGE_URI = 'memory://'

    # Public form limits (fixed window per client IP)
    CONTACT_RATE_LIMIT = int(os.environ.get('CONTACT_RATE_LIMIT', '3'))
    NEWSLETTER_RATE_LIMIT = int(os.environ.get('NEWSLETTER_RATE_LIMIT', '3'))
    FORM_RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get('FORM_RATE_LIMIT_WINDOW_SECONDS', '3600'))

    # Uploads
    UPLOAD_DIR = os.environ.get('UPLOAD_DIR', 'uploads')
    PROFILE_PHOTO_BUCKET = 'profile-photos'
    PROFILE_PHOTO_MAX_BYTES = 10 * 1024 * 1024
    MAX_CONTENT_LENGTH = 12 * 1024 * 1024

    # Analytics
    ANALYTICS_SESSION_WINDOW_MINUTES = int(os.environ.get('ANALYTICS_SESSION_WINDOW_MINUTES', '60'))
    GEO_LOOKUP_ENABLED = os.environ.get('GEO_LOOKUP_ENABLED', 'true').lower() == 'true'
    GEO_LOOKUP_URL = os.environ.get('GEO_LOOKUP_URL', 'http://ip-api.com/json/{ip}')
    GEO_LOOKUP_TIMEOUT = float(os.environ.get('GEO_LOOKUP_TIMEOUT', '3'))


class DevelopmentConfig(BaseConfig):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return _database_uri('')


class TestingConfig(BaseConfig):
    """Testing configuration"""
    DEBUG = True
    TESTING = True

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return 'sqlite:///:memory:'

    SQLALCHEMY_ENGINE_OPTIONS = {}

    JWT_SECRET_KEY = 'test-jwt-secret'
    SITE_URL = 'http://testserver'
    EMAIL_ENABLED = True
    RATELIMIT_ENABLED = False
    GEO_LOOKUP_ENABLED = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
