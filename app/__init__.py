"""
Anamola Membership Platform
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .extensions import db, migrate
from .config import get_config, validate_config
from .utils.errors import (
    ErrorCode,
    bad_request,
    error_response,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
)
from .utils.exceptions import AnamolaError
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()
    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Configure CORS - the member-facing frontend only
    CORS(
        app,
        origins=[app.config['FRONTEND_URL']],
        supports_credentials=True,
        allow_headers=['Content-Type', 'Authorization']
    )

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/api/health')
    def health_check():
        return {'status': 'OK', 'service': 'anamola-membership'}

    log_startup_summary(app, config_name)

    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    # Auth
    from .api.auth import auth_bp

    # Payments (checkout and activation)
    from .api.payments import payments_bp

    # Member dashboard
    from .api.member import member_bp

    # Admin API
    from .api.admin import admin_bp

    # Webhooks
    from .webhooks.stripe import stripe_webhook_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(payments_bp, url_prefix='/api')
    app.register_blueprint(member_bp, url_prefix='/api/member')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(stripe_webhook_bp, url_prefix='/api')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers. Every error body is {"error": message}."""
    renderers = {
        400: bad_request,
        401: unauthorized,
        403: forbidden,
        404: not_found,
    }

    @app.errorhandler(AnamolaError)
    def handle_anamola_error(error):
        render = renderers.get(error.status_code)
        if render:
            return render(error.message, error.code)
        return error_response(error.message, error.code, error.status_code)

    @app.errorhandler(404)
    def handle_not_found(error):
        return not_found('Endpoint not found')

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response('Method not allowed', ErrorCode.METHOD_NOT_ALLOWED, 405, log_error=False)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return error_response(error.description or error.name, ErrorCode.INVALID_REQUEST, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(f'Unhandled error: {error}')
        db.session.rollback()
        return internal_error('Internal server error')


def log_startup_summary(app: Flask, config_name: str) -> None:
    """Log which providers are configured, never their values."""
    stripe_key = app.config.get('STRIPE_SECRET_KEY') or ''
    if stripe_key.startswith('sk_live_'):
        stripe_mode = 'LIVE'
    elif stripe_key:
        stripe_mode = 'TEST'
    else:
        stripe_mode = 'NOT CONFIGURED'

    logger.info(f'Anamola API starting ({config_name})')
    logger.info(f'Stripe mode: {stripe_mode}')
    logger.info(f"Supabase URL: {'loaded' if app.config.get('SUPABASE_URL') else 'missing'}")
    logger.info(f"Supabase anon key: {'loaded' if app.config.get('SUPABASE_ANON_KEY') else 'missing'}")
    logger.info(f"Stripe webhook secret: {'loaded' if app.config.get('STRIPE_WEBHOOK_SECRET') else 'missing'}")
    logger.info(f"Frontend URL: {app.config['FRONTEND_URL']}")
