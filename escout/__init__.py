"""Application factory for the esports scouting account API."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from escout.blueprints import auth_bp, register_error_handlers
from escout.config import Config
from escout.extensions import db, migrate, limiter
from escout.security.config import (
    configure_security_headers,
    validate_input_length,
)


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Ensure models are registered for migrations
    import escout.models  # noqa: F401

    # Safety net for development environments without migrations
    if app.config.get('AUTO_CREATE_TABLES'):
        try:
            with app.app_context():
                db.create_all()
        except SQLAlchemyError as e:
            app.logger.warning(f"Could not create tables at startup: {e}")

    # Configure security
    configure_security_headers(app)
    validate_input_length(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    @app.route('/')
    def index():
        return jsonify({'success': True, 'message': 'API Running...'})

    # Register CLI commands
    from escout.commands import register_commands
    register_commands(app)

    return app
