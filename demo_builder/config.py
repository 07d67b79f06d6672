"""
Voice Agent Demo Builder - Configuration
Environment-based configuration for different deployment stages
"""
import os


class BaseConfig:
    """Base configuration"""

    # Flask - Secret key (required in production)
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Warn if using dev key in production-like environment
    _is_production = os.environ.get('FLASK_ENV') == 'production'
    if SECRET_KEY == 'dev-secret-key-change-in-production' and _is_production:
        import warnings
        warnings.warn("SECRET_KEY is using default dev value in production! Set SECRET_KEY env var.")

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # Record store - JSON files for clients and demo links
    DATA_DIR = os.environ.get('DATA_DIR', './data')

    # Demo links
    DEFAULT_DEMO_DURATION_SECONDS = int(os.environ.get('DEFAULT_DEMO_DURATION_SECONDS', '120'))
    DEFAULT_LINK_EXPIRY_DAYS = int(os.environ.get('DEFAULT_LINK_EXPIRY_DAYS', '7'))
    SLUG_MAX_ATTEMPTS = int(os.environ.get('SLUG_MAX_ATTEMPTS', '5'))

    # Rate limiting
    RATE_LIMIT_ENABLED = os.environ.get('RATE_LIMIT_ENABLED', 'true').lower() == 'true'
    RATE_LIMIT_DEFAULTS = os.environ.get('RATE_LIMIT_DEFAULTS', '200 per day;50 per hour')


class DevelopmentConfig(BaseConfig):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Override with production requirements
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')


class TestingConfig(BaseConfig):
    """Testing configuration"""
    DEBUG = True
    TESTING = True

    # Tests hammer the API from one address
    RATE_LIMIT_ENABLED = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
