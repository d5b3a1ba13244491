import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# Required field absent or malformed
class ValidationError(ApiError):
    status_code = 400


# Missing, malformed or expired credential
class AuthenticationError(ApiError):
    status_code = 401


# Role gate or group membership denial
class AuthorizationError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


def error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 404:
            return error_response(f"Not Found - {request.path}", 404)
        return error_response(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Server error", 500)
