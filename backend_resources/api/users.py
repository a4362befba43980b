"""Users API endpoints.

Authorization is applied by the middleware in authorization.py before these
views run; provisioning failures propagate to the error handlers.
"""
from __future__ import annotations

from flask import Blueprint, Response, current_app, g, jsonify, request

from backend_resources.core.user_service import UserService
from backend_resources.core.validators import validate_user_request

bp = Blueprint("users", __name__)


def get_user_service() -> UserService:
    return current_app.extensions["user_service"]


@bp.route("", methods=["POST"])
def create_user():
    """Create a user in Keycloak; 201 with an empty body."""
    payload = request.get_json(silent=True)
    user_request = validate_user_request(payload)
    get_user_service().create_user(user_request)
    return Response(status=201)


@bp.route("/hello", methods=["GET"])
def hello():
    """Echo the authenticated principal name."""
    return (g.principal.name, 200, {"Content-Type": "text/plain; charset=utf-8"})


@bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    profile = get_user_service().get_user_by_id(user_id)
    return jsonify(profile.to_dict()), 200
