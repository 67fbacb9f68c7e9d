"""
Domain errors and the JSON error envelope.

Services raise the typed errors below; ``register_error_handlers`` turns them
into ``{"success": false, "error": ...}`` responses with the matching status.
"""

import traceback
from typing import List, Optional

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .extensions import db


class AppError(Exception):
    status_code = 500
    kind = "app_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    kind = "validation_error"
    default_message = "Validation failed"


class Unauthorized(AppError):
    status_code = 401
    kind = "unauthorized"
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    kind = "invalid_credentials"
    default_message = "Invalid credentials"


class InvalidToken(Unauthorized):
    kind = "invalid_token"
    default_message = "Invalid token"


class TokenExpired(Unauthorized):
    kind = "token_expired"
    default_message = "Token expired"


class Forbidden(AppError):
    status_code = 403
    kind = "forbidden"
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    kind = "not_found"
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    kind = "conflict"
    default_message = "Resource already exists"


class ImageProcessingError(AppError):
    kind = "image_processing_error"
    default_message = "Failed to process image"


def error_response(message: str, status_code: int, details: Optional[List[str]] = None):
    body = {"success": False, "error": message}
    if details:
        body["details"] = details
    return jsonify(body), status_code


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        db.session.rollback()
        log = current_app.logger.error if error.status_code >= 500 else current_app.logger.info
        log(
            "%s %s -> %s (%s): %s",
            request.method,
            request.path,
            error.status_code,
            error.kind,
            error.message,
        )
        return error_response(error.message, error.status_code, error.details)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        db.session.rollback()
        current_app.logger.warning(f"Integrity error on {request.method} {request.path}: {error.orig}")
        message = "Resource already exists"
        if "foreign key" in str(error.orig).lower():
            message = "Referenced resource not found"
        return error_response(message, 409)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return error_response("Upload too large", 413)

    @app.errorhandler(404)
    def handle_not_found(error):
        return error_response(f"Route {request.method} {request.path} not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response(f"Method {request.method} not allowed for {request.path}", 405)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException):
            return error_response(error.description or error.name, error.code or 500)

        db.session.rollback()
        current_app.logger.error(
            f"Unhandled error on {request.method} {request.path}", exc_info=error
        )
        body = {"success": False, "error": "Internal server error"}
        if not current_app.config.get("IS_PRODUCTION"):
            body["message"] = str(error)
            body["details"] = [type(error).__name__]
            body["stack"] = traceback.format_exception(type(error), error, error.__traceback__)
        return jsonify(body), 500
