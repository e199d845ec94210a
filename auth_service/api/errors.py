import logging

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from auth_service.services.errors import AuthenticationError, ServiceError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def error_response(error: str, message: str, status: int, errors: list | None = None):
    payload = {"error": error, "message": message, "status": status}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def field_errors(messages) -> list:
    """Flatten marshmallow messages into [{"field", "msg"}], one entry per field."""
    if isinstance(messages, list):
        return [{"field": "_schema", "msg": str(m)} for m in messages[:1]]
    out = []
    for field, value in messages.items():
        while isinstance(value, dict) and value:
            value = next(iter(value.values()))
        msg = value[0] if isinstance(value, list) and value else value
        out.append({"field": field, "msg": str(msg)})
    return out


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        if isinstance(err, AuthenticationError):
            logger.debug("Authentication rejected: %s", err.reason)
        elif err.status_code >= 500:
            logger.exception("Service error", exc_info=err)
        else:
            logger.info("Request rejected: %s", err.message)
        return error_response(err.error_code, err.message, err.status_code, errors=err.errors)

    # Schema validation errors map to 400 with one message per field
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        errors = field_errors(err.messages)
        message = errors[0]["msg"] if errors else "Invalid input"
        return error_response("VALIDATION_ERROR", message, 400, errors=errors)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        return error_response(_HTTP_CODES.get(status, "BAD_REQUEST"), err.description, status)

    # Persistence faults: log the cause, never echo it
    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)
