# Overview: Application factory; wires config, logging, extensions, blueprints and CLI.

import logging

from flask import Flask

from .config import Config
from .extensions import db, migrate
from .responses import failure


def create_app(config_object=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)

    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.tills import tills_bp
    from .routes.transactions import transactions_bp
    from .routes.tenders import tenders_bp
    from .routes.orders import orders_bp
    from .routes.customers import customers_bp
    from .routes.expenses import expenses_bp
    from .routes.staff import staff_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(tills_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(tenders_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(staff_bp)

    @app.errorhandler(404)
    def not_found(_error):
        return failure("Resource not found", 404, "not_found")

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return failure("Method not allowed", 405, "method_not_allowed")

    @app.errorhandler(500)
    def server_error(_error):
        return failure("Internal server error", 500, "internal_error")

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
