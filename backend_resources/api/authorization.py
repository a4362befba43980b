"""Authorization middleware.

A single before_request stage resolves the endpoint's policy from
ROUTE_POLICIES, authenticates the bearer token when the policy needs a
principal, and rejects the request before the view function runs:

    no/invalid token      -> AuthenticationError (401)
    missing required role -> AuthorizationError (403)

Views never check roles themselves; they read `g.principal`.
"""
from __future__ import annotations
import logging
from typing import Dict, Optional

from flask import Flask, current_app, g, request

from backend_resources.api import auth
from backend_resources.core.rbac import (
    Authenticated,
    Decision,
    Principal,
    Public,
    RoutePolicy,
    evaluate_policy,
    principal_from_claims,
    require_roles,
)

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """No valid authenticated principal."""


class AuthorizationError(Exception):
    """Authenticated principal lacks the role a route requires."""


def build_route_policies(elevated_role: str) -> Dict[str, RoutePolicy]:
    """Per-endpoint policy table; endpoints not listed are public."""
    return {
        "users.create_user": require_roles(elevated_role),
        "users.get_user": require_roles(elevated_role),
        "users.hello": Authenticated(),
    }


def policy_for(endpoint: Optional[str]) -> RoutePolicy:
    policies = current_app.config["ROUTE_POLICIES"]
    return policies.get(endpoint or "", Public())


def authenticate_request() -> Optional[Principal]:
    """Return the principal of the current request, or None when unauthenticated."""
    try:
        token = auth.extract_bearer_token(request.headers.get("Authorization", ""))
        claims = auth.validate_jwt_token(token)
        return principal_from_claims(claims)
    except (auth.TokenValidationError, ValueError) as exc:
        logger.warning("Authentication failed | path=%s | reason=%s", request.path, exc)
        return None


def enforce_route_policy() -> None:
    """before_request hook: apply the endpoint's policy."""
    policy = policy_for(request.endpoint)
    if isinstance(policy, Public):
        return

    principal = authenticate_request()
    decision = evaluate_policy(policy, principal)

    if decision is Decision.UNAUTHENTICATED:
        raise AuthenticationError("Authentication required")
    if decision is Decision.FORBIDDEN:
        required = ", ".join(sorted(policy.roles))
        logger.warning(
            "Authorization denied | path=%s | principal=%s | required=%s",
            request.path, principal.name, required,
        )
        raise AuthorizationError(f"Required role: {required}")

    g.principal = principal


def register_authorization(app: Flask, elevated_role: str) -> None:
    """Install the policy table and the enforcement hook on the app."""
    app.config["ROUTE_POLICIES"] = build_route_policies(elevated_role)
    app.before_request(enforce_route_policy)
