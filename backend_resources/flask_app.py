"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, middleware, and configuration.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from backend_resources.config import AppConfig, load_settings
from backend_resources.core.keycloak import KeycloakAdminProvider, KeycloakClient
from backend_resources.core.provider import IdentityProvider
from backend_resources.core.user_service import UserService

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(config: Optional[AppConfig] = None, provider: Optional[IdentityProvider] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Settings to use instead of load_settings()
        provider: IdentityProvider to use instead of the Keycloak admin provider
    """
    cfg = config or load_settings()
    _configure_logging(cfg.log_level)

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg

    # Trust X-Forwarded-* headers from the reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore

    if provider is None:
        provider = build_keycloak_provider(cfg)
    app.extensions["user_service"] = UserService(provider)

    from backend_resources.api import authorization, docs, errors, health, users

    app.register_blueprint(health.bp)
    app.register_blueprint(docs.bp)
    app.register_blueprint(users.bp, url_prefix="/api/users")

    authorization.register_authorization(app, cfg.elevated_role)
    errors.register_error_handlers(app)

    mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
    logger.info("Mode=%s; users API registered at /api/users (elevated role: %s)", mode_label, cfg.elevated_role)
    return app


def build_keycloak_provider(cfg: AppConfig) -> KeycloakAdminProvider:
    """Wire the Keycloak admin provider from settings (authenticates lazily)."""
    client = KeycloakClient(cfg.keycloak_url, timeout=cfg.keycloak_request_timeout)
    return KeycloakAdminProvider(
        client,
        cfg.keycloak_realm,
        service_realm=cfg.keycloak_service_realm,
        client_id=cfg.keycloak_service_client_id,
        client_secret=cfg.keycloak_service_client_secret,
        admin_username=cfg.keycloak_admin,
        admin_password=cfg.keycloak_admin_password,
    )


def _configure_logging(level: str) -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
