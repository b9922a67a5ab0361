"""
Configuration management for the Anamola membership platform.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class BaseConfig:
    """Base configuration."""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Supabase Auth (identity store)
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')
    SUPABASE_SERVICE_KEY = os.getenv('SUPABASE_SERVICE_KEY')

    # Stripe (payment provider)
    STRIPE_SECRET_KEY = os.getenv('STRIPE_SECRET_KEY')
    STRIPE_PUBLISHABLE_KEY = os.getenv('STRIPE_PUBLISHABLE_KEY')
    STRIPE_WEBHOOK_SECRET = os.getenv('STRIPE_WEBHOOK_SECRET')

    # Membership pricing - a single fixed fee, amount in major units
    MEMBERSHIP_AMOUNT = int(os.getenv('MEMBERSHIP_AMOUNT', '100'))
    MEMBERSHIP_CURRENCY = os.getenv('MEMBERSHIP_CURRENCY', 'mzn')
    DEFAULT_MEMBERSHIP_TYPE = 'Standard Membership'

    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3002')
    PORT = int(os.getenv('PORT', '5000'))


class DevelopmentConfig(BaseConfig):
    """Development configuration."""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        'sqlite:///anamola_dev.db'  # SQLite fallback for local dev
    )


class ProductionConfig(BaseConfig):
    """Production configuration."""
    DEBUG = False

    # Supabase hands out postgres:// URLs
    _db_url = os.getenv('DATABASE_URL', '')
    if _db_url.startswith('postgres://'):
        # SQLAlchemy requires postgresql:// not postgres://
        _db_url = _db_url.replace('postgres://', 'postgresql://', 1)

    SQLALCHEMY_DATABASE_URI = _db_url

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 5,
        'pool_recycle': 300,
        'pool_pre_ping': True,  # Verify connections before using
    }

    REQUIRED_SETTINGS = (
        'SECRET_KEY',
        'SUPABASE_URL',
        'SUPABASE_ANON_KEY',
        'STRIPE_SECRET_KEY',
        'STRIPE_WEBHOOK_SECRET',
    )

    @classmethod
    def validate(cls) -> None:
        """
        Validate provider settings in production.

        Raises:
            RuntimeError: If a required setting is missing or SECRET_KEY is unsafe
        """
        missing = [name for name in cls.REQUIRED_SETTINGS if not os.getenv(name)]
        if missing:
            raise RuntimeError(
                f"CRITICAL: missing required environment variables: {', '.join(missing)}"
            )

        if len(os.getenv('SECRET_KEY', '')) < 32:
            raise RuntimeError(
                "CRITICAL: SECRET_KEY is too short (minimum 32 characters required)!\n"
                "Generate a secure key with: python -c \"import secrets; print(secrets.token_hex(32))\""
            )


class TestingConfig(BaseConfig):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SUPABASE_URL = 'https://test-project.supabase.co'
    SUPABASE_ANON_KEY = 'test-anon-key'
    STRIPE_SECRET_KEY = 'sk_test_dummy'
    STRIPE_PUBLISHABLE_KEY = 'pk_test_dummy'
    STRIPE_WEBHOOK_SECRET = 'whsec_test_secret'
    FRONTEND_URL = 'http://localhost:3002'


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}


def get_config(config_name: str = 'development'):
    """Get configuration class by name."""
    return config_map.get(config_name, DevelopmentConfig)


def validate_config(config_name: str = 'development') -> None:
    """
    Validate configuration before app startup.

    Args:
        config_name: The configuration environment name

    Raises:
        RuntimeError: If validation fails in production
    """
    if config_name == 'production':
        ProductionConfig.validate()
