"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value
        except OSError as exc:
            logger.warning("Failed to read %s/%s: %s", SECRETS_DIR, secret_name, exc)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    # Mode
    demo_mode: bool

    # Keycloak
    keycloak_url: str = ""
    keycloak_realm: str = "demo"
    keycloak_service_realm: str = "demo"
    keycloak_issuer: str = ""
    keycloak_server_url: str = ""
    keycloak_request_timeout: float = 5.0

    # Service account (preferred provider credentials)
    keycloak_service_client_id: str = "backend-resources"
    keycloak_service_client_secret: str = ""

    # Admin credentials (fallback provider credentials)
    keycloak_admin: str = ""
    keycloak_admin_password: str = ""

    # Token validation
    jwt_audience: str = ""

    # Roles
    elevated_role: str = "MODERATOR"

    # Logging
    log_level: str = "INFO"

    @property
    def uses_service_account(self) -> bool:
        """True when the admin API is reached with client credentials."""
        return bool(self.keycloak_service_client_secret)


def _get_or_default(var_name: str, demo_default: Optional[str] = None, required: bool = True, demo_mode: bool = False) -> str:
    """Get environment variable or fall back to the demo default."""
    value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        logger.info("[demo-mode] Using default for %s", var_name)
        return demo_default

    if not required:
        return ""

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise RuntimeError(f"KEYCLOAK_REQUEST_TIMEOUT must be a number, got {raw!r}")
    if timeout <= 0:
        raise RuntimeError("KEYCLOAK_REQUEST_TIMEOUT must be positive")
    return timeout


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets."""
    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"

    # Keycloak URLs
    keycloak_url = _get_or_default(
        "KEYCLOAK_URL",
        demo_default="http://127.0.0.1:8080",
        demo_mode=demo_mode,
    ).rstrip("/")
    keycloak_realm = os.environ.get("KEYCLOAK_REALM", "demo")
    keycloak_service_realm = os.environ.get("KEYCLOAK_SERVICE_REALM", keycloak_realm)
    keycloak_issuer = os.environ.get("KEYCLOAK_ISSUER", f"{keycloak_url}/realms/{keycloak_realm}")
    keycloak_server_url = os.environ.get("KEYCLOAK_SERVER_URL", keycloak_issuer).rstrip("/")
    keycloak_request_timeout = _parse_timeout(os.environ.get("KEYCLOAK_REQUEST_TIMEOUT", "5"))

    # Service account
    keycloak_service_client_id = os.environ.get("KEYCLOAK_SERVICE_CLIENT_ID", "backend-resources")
    keycloak_service_client_secret = _load_secret_from_file(
        "keycloak_service_client_secret",
        "KEYCLOAK_SERVICE_CLIENT_SECRET",
    ) or ""

    # Admin credentials (only needed without a service account)
    keycloak_admin = os.environ.get("KEYCLOAK_ADMIN", "admin" if demo_mode else "")
    keycloak_admin_password = _load_secret_from_file(
        "keycloak_admin_password",
        "KEYCLOAK_ADMIN_PASSWORD",
    ) or ("admin" if demo_mode else "")

    if not keycloak_service_client_secret and not (keycloak_admin and keycloak_admin_password):
        raise RuntimeError(
            "Keycloak credentials missing: set KEYCLOAK_SERVICE_CLIENT_SECRET "
            "or KEYCLOAK_ADMIN/KEYCLOAK_ADMIN_PASSWORD (or DEMO_MODE=true)."
        )

    jwt_audience = os.environ.get("JWT_AUDIENCE", "").strip()
    elevated_role = os.environ.get("ELEVATED_ROLE", "MODERATOR").strip() or "MODERATOR"
    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    logger.info("Mode=%s; realm=%s; keycloak=%s", mode_label, keycloak_realm, keycloak_url)
    if demo_mode:
        logger.warning("Demo credentials in use. Do not deploy with these defaults.")

    return AppConfig(
        demo_mode=demo_mode,
        keycloak_url=keycloak_url,
        keycloak_realm=keycloak_realm,
        keycloak_service_realm=keycloak_service_realm,
        keycloak_issuer=keycloak_issuer,
        keycloak_server_url=keycloak_server_url,
        keycloak_request_timeout=keycloak_request_timeout,
        keycloak_service_client_id=keycloak_service_client_id,
        keycloak_service_client_secret=keycloak_service_client_secret,
        keycloak_admin=keycloak_admin,
        keycloak_admin_password=keycloak_admin_password,
        jwt_audience=jwt_audience,
        elevated_role=elevated_role,
        log_level=log_level,
    )
