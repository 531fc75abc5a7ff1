"""JSON error responses for the API."""

from __future__ import annotations

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from escout.extensions import db
from escout.services.exceptions import AuthError, ValidationFailed


def error_response(message: str, status_code: int, **extra):
    payload = {'success': False, 'message': message}
    payload.update(extra)
    return jsonify(payload), status_code


def register_error_handlers(app):
    @app.errorhandler(AuthError)
    def handle_auth_error(error: AuthError):
        if isinstance(error, ValidationFailed):
            return error_response(error.message, error.status_code, errors=error.errors)
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        db.session.rollback()
        current_app.logger.exception(f"Unexpected error: {error}")
        return error_response('Internal server error', 500)

    return app


__all__ = ["error_response", "register_error_handlers"]
