"""Flask application factory for the ZakatAid calculation service."""
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


logger = logging.getLogger('zakataid')


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    # Trust X-Forwarded-For from reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    from zakataid.services.config import get_app_config
    app.config.update(get_app_config())

    # Override with provided config
    if config:
        app.config.update(config)

    # Initialize database
    from zakataid import db
    db.init_app(app)

    # Register CLI commands
    from zakataid import cli
    cli.register_cli(app)

    # Register blueprints
    from zakataid.routes.health import health_bp
    from zakataid.routes.api import api_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    logger.debug('App created with data dir %s', app.config['DATA_DIR'])
    return app
