"""Pytest shared fixtures."""
import itertools
from unittest.mock import create_autospec

import pytest
import requests

from backend_resources.api import auth
from backend_resources.config import AppConfig
from backend_resources.core.keycloak import KeycloakAdminProvider
from backend_resources.core.provider import CreatedUser
from backend_resources.flask_app import create_app


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Fail loudly if a test reaches for the network without stubbing it."""

    def _blocked(*args, **kwargs):
        raise RuntimeError(f"Unexpected network access in tests: {args} {kwargs.get('url', '')}")

    monkeypatch.setattr(requests, "request", _blocked)
    monkeypatch.setattr(requests, "get", _blocked)
    monkeypatch.setattr(requests, "post", _blocked)


# ─────────────────────────────────────────────────────────────────────────────
# Configuration and Provider
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def app_config():
    return AppConfig(
        demo_mode=True,
        keycloak_url="http://keycloak.test",
        keycloak_realm="demo",
        keycloak_service_realm="demo",
        keycloak_issuer="http://keycloak.test/realms/demo",
        keycloak_server_url="http://keycloak.test/realms/demo",
        keycloak_admin="admin",
        keycloak_admin_password="admin",
        log_level="WARNING",
    )


@pytest.fixture()
def provider():
    """IdentityProvider double; create_user succeeds with 201 by default."""
    mock = create_autospec(KeycloakAdminProvider, instance=True)
    mock.create_user.return_value = CreatedUser(status=201, location="http://keycloak.test/admin/realms/demo/users/123")
    return mock


# ─────────────────────────────────────────────────────────────────────────────
# Bearer Tokens
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def token_claims(monkeypatch):
    """Registry of fake bearer tokens -> claims, consulted instead of JWKS validation."""
    registry = {}

    def _validate(token):
        try:
            return registry[token]
        except KeyError:
            raise auth.TokenValidationError("Invalid signature (token tampered or wrong key)")

    monkeypatch.setattr(auth, "validate_jwt_token", _validate)
    return registry


@pytest.fixture()
def auth_headers(token_claims):
    """Build Authorization headers for a principal with the given realm roles."""
    counter = itertools.count()

    def _headers(username="tester", *roles):
        token = f"token-{next(counter)}"
        token_claims[token] = {
            "sub": f"sub-{username}",
            "preferred_username": username,
            "realm_access": {"roles": list(roles)},
        }
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def flask_app(app_config, provider):
    flask_app = create_app(config=app_config, provider=provider)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(flask_app):
    with flask_app.test_client() as client:
        yield client
