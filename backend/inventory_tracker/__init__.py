# backend/inventory_tracker/__init__.py

from flask import Flask

from .config import Config
from .extensions import db, migrate



def create_app(config_overrides: dict | None = None, email_sender=None) -> Flask:
    """
    Application factory.

    config_overrides is applied on top of Config before any extension reads
    the configuration (tests use it for the in-memory database).
    email_sender replaces the SMTP sender built from config.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # app.logger is the "inventory_tracker" logger; module loggers propagate to it
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Services are built once and shared by every request
    from .services import init_services
    init_services(app, email_sender=email_sender)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from .routes.items import items_bp
    from .routes.users import users_bp
    from .routes.upc import upc_bp
    from .routes.system import system_bp

    app.register_blueprint(items_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(upc_bp)
    app.register_blueprint(system_bp)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
