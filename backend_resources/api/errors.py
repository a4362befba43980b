"""Error handlers for the application.

Every failure becomes a JSON body `{"error": <reason>, "message": <text>}`;
no traceback or provider detail is returned to the client.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from backend_resources.api.authorization import AuthenticationError, AuthorizationError
from backend_resources.core.user_service import ProvisioningError
from backend_resources.core.validators import ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        """Handle request body validation failures."""
        return jsonify({
            "error": "Bad Request",
            "message": "Request validation failed",
            "fields": error.errors,
        }), 400

    @app.errorhandler(AuthenticationError)
    def authentication_error(error):
        return (
            jsonify({"error": "Unauthorized", "message": "Authentication required"}),
            401,
            {"WWW-Authenticate": "Bearer"},
        )

    @app.errorhandler(AuthorizationError)
    def authorization_error(error):
        return jsonify({"error": "Forbidden", "message": str(error) or "Insufficient permissions"}), 403

    @app.errorhandler(ProvisioningError)
    def provisioning_error(error):
        """Handle identity-provider failures surfaced by UserService."""
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Render werkzeug HTTP errors (404, 405, 415, ...) as JSON."""
        return jsonify({"error": error.name, "message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        logger.error("Unhandled exception: %s", error, exc_info=True)
        return jsonify({"error": "Internal Server Error", "message": "An unexpected error occurred"}), 500
