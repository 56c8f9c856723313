"""
Alkitu Site - Bilingual marketing site and content API
Public pages in Spanish and English, portfolio projects, contact form,
newsletter double opt-in, team profiles and anonymous page analytics
"""
from flask import Flask, render_template, request, send_from_directory
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
import os
import logging

__version__ = "1.4.0"

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Client IP and scheme from the reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Load config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    from alkitu.config import config
    # Use instance instead of class to support @property
    config_instance = config[config_name]()
    app.config.from_object(config_instance)

    cors_origins = app.config.get('CORS_ORIGINS', '*')
    if cors_origins == '*' and config_name == 'production':
        logger.warning("SECURITY: CORS_ORIGINS is set to '*' in production! Set specific origins.")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    # Global request guard; the contact and newsletter forms have their own limiters
    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=[app.config['RATELIMIT_DEFAULT']],
        storage_uri=app.config['RATELIMIT_STORAGE_URI']
    )
    app.limiter = limiter

    from alkitu.services.rate_limiter import init_form_limiters
    init_form_limiters(app)

    # Initialize database
    from alkitu.database import check_connection, init_db
    init_db(app)

    # Register blueprints
    from alkitu.routes import register_routes
    register_routes(app)

    register_error_handlers(app)

    # Health check
    @app.route('/health')
    def health():
        ok, db_status = check_connection()
        return {
            'status': 'healthy' if ok else 'degraded',
            'version': __version__,
            'database': db_status
        }

    # API info endpoint
    @app.route('/api')
    def api_info():
        return {
            'name': 'Alkitu API',
            'version': __version__,
            'status': 'running',
            'endpoints': {
                'auth': '/api/auth',
                'projects': '/api/projects',
                'categories': '/api/categories',
                'profiles': '/api/profiles',
                'contact': '/api/contact',
                'newsletter': '/api/newsletter',
                'track': '/api/track',
                'analytics': '/api/analytics',
                'translations': '/api/translations',
                'admin': '/api/admin'
            },
            'locales': list(app.config['SUPPORTED_LOCALES'])
        }

    # Uploaded profile photos
    @app.route('/uploads/<path:filename>')
    def uploads(filename):
        from alkitu.services.storage_service import storage_service
        return send_from_directory(storage_service.root, filename)

    logger.info(f"Alkitu site {__version__} started ({config_name})")
    return app


def register_error_handlers(app: Flask):
    """Every JSON error uses the {success: false, error: {...}} envelope"""
    from alkitu.database import db
    from alkitu.errors import ApiError, DatabaseError, api_error, render_api_error

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error(f"{error.code}: {error.message}")
        return render_api_error(error)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error(f"Database error on {request.method} {request.path}: {error}", exc_info=True)
        return render_api_error(DatabaseError())

    @app.errorhandler(400)
    def bad_request(error):
        return api_error('BAD_REQUEST', getattr(error, 'description', None) or 'Invalid request', 400)

    @app.errorhandler(401)
    def unauthorized(error):
        return api_error('UNAUTHORIZED', 'Authentication required', 401)

    @app.errorhandler(403)
    def forbidden(error):
        return api_error('FORBIDDEN', 'Access denied', 403)

    @app.errorhandler(404)
    def not_found(error):
        if not request.path.startswith('/api'):
            from alkitu.i18n import negotiate_locale
            from alkitu.routes.pages import site_context
            lang = (request.view_args or {}).get('lang')
            context = site_context(lang if lang in app.config['SUPPORTED_LOCALES'] else negotiate_locale(request))
            return render_template('pages/not_found.html', **context), 404
        return api_error('NOT_FOUND', 'The requested resource was not found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return api_error('METHOD_NOT_ALLOWED', 'Method not allowed', 405)

    @app.errorhandler(413)
    def payload_too_large(error):
        return api_error('FILE_TOO_LARGE', 'Request body is too large', 413)

    @app.errorhandler(429)
    def too_many_requests(error):
        return api_error('RATE_LIMIT_EXCEEDED', 'Too many requests', 429)

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return api_error('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Catch-all for unhandled exceptions"""
        if isinstance(error, HTTPException):
            return api_error('HTTP_ERROR', error.description or error.name, error.code)
        db.session.rollback()
        logger.error(f"Unhandled exception: {error}", exc_info=True)
        return api_error('INTERNAL_ERROR', 'An unexpected error occurred', 500)
