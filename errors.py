"""Error taxonomy shared by every blueprint and the JSON error handlers."""

import logging
from typing import Dict, List, Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto a JSON error response."""

    status = 500
    code = "INTERNAL_ERROR"
    message = "Internal error"

    def __init__(self, message: Optional[str] = None, details=None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    """Malformed or out-of-range input. ``fields`` maps field name -> messages."""

    status = 400
    code = "VALIDATION_ERROR"
    message = "Invalid input"

    def __init__(self, fields: Dict[str, List[str]], message: Optional[str] = None) -> None:
        self.fields = dict(fields)
        super().__init__(message, details={"fieldErrors": self.fields})


class Unauthenticated(ApiError):
    status = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"


class InvalidCredentials(ApiError):
    status = 401
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class Forbidden(ApiError):
    status = 403
    code = "FORBIDDEN"
    message = "Forbidden"


class NotFound(ApiError):
    status = 404
    code = "NOT_FOUND"
    message = "Not found"


class Conflict(ApiError):
    status = 409
    code = "CONFLICT"
    message = "Conflict"


class ConfigurationError(ApiError):
    """A required asset (e.g. the invoice template) is not available."""

    status = 500
    code = "TEMPLATE_ERROR"
    message = "Configuration error"


class StoreError(ApiError):
    """Opaque failure reported by the storage layer."""

    status = 500
    code = "STORE_ERROR"
    message = "Storage error"


def register_error_handlers(app: Flask) -> None:
    """Render ``ApiError`` and routing errors as ``{message, code, details}``."""

    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        if exc.status >= 500:
            logger.error("%s: %s", exc.code, exc.message)
        return jsonify(exc.to_dict()), exc.status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = (exc.name or "error").upper().replace(" ", "_")
        return jsonify(message=exc.description, code=code), exc.code
