from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core.exceptions import GoogleAPIError

from .errors import (
    AppError,
    NotFoundError,
    RemoteOperationFailed,
    UploadFailed,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(error):
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors, including invalid material amounts."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles missing groups, users and messages."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(UploadFailed)
def handle_upload_failed(error):
    """Handles failed image signing or uploads."""
    current_app.logger.error(f"Upload Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(RemoteOperationFailed)
def handle_remote_operation_failed(error):
    """Handles document store failures surfaced by the services."""
    current_app.logger.error(f"Remote Operation Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles the remaining domain errors (ledger, membership, access)."""
    current_app.logger.warning(f"Application Error: {error.message}")
    return _error_response(error)


@error_handlers_bp.app_errorhandler(GoogleAPIError)
def handle_firestore_error(e):
    """Handles Firestore errors that escaped a service boundary."""
    current_app.logger.error(f"Firestore Error: {e}")
    # Avoid exposing raw database error details to the user
    return _error_response(RemoteOperationFailed())


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found."}), 404


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "An unexpected error occurred."}), 500


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or a request
    sent without the token.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return (
        jsonify({"error": "Your session may have expired. Please try again."}),
        400,
    )
