"""
Voice Agent Demo Builder
Client demo pipeline and prompt generation for after-hours voice agents
"""
from flask import Flask, jsonify
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
import os
import logging

__version__ = "1.0.0"

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(config_name=None, data_dir=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Behind a reverse proxy, trust its forwarded scheme and host
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Load config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    from demo_builder.config import config
    app.config.from_object(config.get(config_name, config['default'])())
    if data_dir:
        app.config['DATA_DIR'] = data_dir

    cors_origins = app.config.get('CORS_ORIGINS', '*')
    if cors_origins == '*' and config_name == 'production':
        logger.warning("SECURITY: CORS_ORIGINS is set to '*' in production! Set specific origins.")
    CORS(app, origins=cors_origins)

    # Rate limiting
    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=app.config['RATE_LIMIT_DEFAULTS'].split(';'),
        storage_uri="memory://",
        enabled=app.config.get('RATE_LIMIT_ENABLED', True)
    )
    app.limiter = limiter

    # Services shared by the blueprints
    from demo_builder.services import DataService, LifecycleService, DemoLinkService
    app.data_service = DataService(app.config['DATA_DIR'])
    app.lifecycle_service = LifecycleService(app.data_service)
    app.demo_link_service = DemoLinkService(
        app.data_service,
        max_slug_attempts=app.config['SLUG_MAX_ATTEMPTS']
    )

    # Register blueprints
    from demo_builder.routes import register_routes
    register_routes(app)

    # ==========================================
    # GLOBAL ERROR HANDLERS
    # ==========================================

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'error': 'Bad request',
            'message': str(error.description) if hasattr(error, 'description') else 'Invalid request'
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method not allowed',
            'message': 'The method is not allowed for the requested URL'
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal server error',
            'message': 'An unexpected error occurred'
        }), 500

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Catch-all for unhandled exceptions"""
        if isinstance(error, HTTPException):
            return jsonify({'error': error.name, 'message': error.description}), error.code
        logger.error(f"Unhandled exception: {error}", exc_info=True)
        return jsonify({
            'error': 'Server error',
            'message': 'An unexpected error occurred'
        }), 500

    # Health check
    @app.route('/health')
    def health():
        return {
            'status': 'healthy',
            'version': __version__,
            'records': app.data_service.get_stats()
        }

    # API info endpoint
    @app.route('/api')
    def api_info():
        return {
            'name': 'Voice Agent Demo Builder API',
            'version': __version__,
            'status': 'running',
            'endpoints': {
                'clients': '/api/clients',
                'demo_links': '/api/demo-links'
            }
        }

    return app
