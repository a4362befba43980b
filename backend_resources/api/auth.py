"""
Bearer token authentication for the users API.

Validates JWT access tokens issued by Keycloak (RFC 6750 / RFC 7519).
Tokens are issued elsewhere; this module only verifies them.

Security:
- RSA-SHA256 signature verification via JWKS (RFC 7517)
- Expiration, issuer, and (optional) audience validation
- JWKS caching (1-hour refresh)
"""

import logging
from typing import Dict, Any

import jwt
from jwt import PyJWKClient
from jwt.exceptions import (
    ExpiredSignatureError,
    InvalidIssuerError,
    InvalidAudienceError,
    InvalidSignatureError,
    DecodeError,
    PyJWKClientError,
)
from flask import current_app

logger = logging.getLogger(__name__)

JWKS_EXTENSION_KEY = "jwks_client"


class TokenValidationError(Exception):
    """Exception raised when JWT token validation fails."""
    pass


def extract_bearer_token(auth_header: str) -> str:
    """Return the token from an `Authorization: Bearer <token>` header.

    Raises:
        TokenValidationError: If the header is missing, malformed, or empty
    """
    if not auth_header:
        raise TokenValidationError("Authorization header required. Use 'Authorization: Bearer <token>'")

    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        raise TokenValidationError("Invalid Authorization header format. Expected 'Bearer <token>'")

    token = token.strip()
    if not token:
        raise TokenValidationError("Bearer token is empty")
    return token


def get_jwks_client() -> PyJWKClient:
    """
    Get the JWKS client cached on the current app.

    Keys are fetched from the realm's certs endpoint and cached; the kid in
    the JWT header selects the key. Each app keeps its own client.
    """
    client = current_app.extensions.get(JWKS_EXTENSION_KEY)
    if client is None:
        cfg = current_app.config["APP_CONFIG"]
        jwks_url = f"{cfg.keycloak_server_url}/protocol/openid-connect/certs"

        logger.info("Initializing JWKS client for: %s", jwks_url)

        client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
            lifespan=3600,
            headers={"User-Agent": "backend-resources/1.0"},
        )
        current_app.extensions[JWKS_EXTENSION_KEY] = client

    return client


def reset_jwks_client() -> None:
    """Drop the current app's cached JWKS client (config reload)."""
    current_app.extensions.pop(JWKS_EXTENSION_KEY, None)


def validate_jwt_token(token: str) -> Dict[str, Any]:
    """
    Validate a JWT bearer token.

    Validations performed:
    1. Signature (RS256 via JWKS)
    2. Expiration and not-before
    3. Issuer
    4. Audience, only when JWT_AUDIENCE is configured

    Args:
        token: JWT token string (without "Bearer " prefix)

    Returns:
        dict: Validated token claims

    Raises:
        TokenValidationError: If any validation fails
    """
    cfg = current_app.config["APP_CONFIG"]

    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)

        options = {
            "verify_signature": True,
            "verify_exp": True,
            "verify_nbf": True,
            "verify_iss": True,
            "verify_aud": bool(cfg.jwt_audience),
            "require": ["exp", "iat"],
        }
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            issuer=cfg.keycloak_issuer,
            audience=cfg.jwt_audience or None,
            options=options,
            leeway=5,
        )

        logger.debug("JWT validated for subject: %s", claims.get("sub"))
        return claims

    except ExpiredSignatureError:
        raise TokenValidationError("Token expired (exp claim)")
    except InvalidIssuerError as e:
        raise TokenValidationError(f"Invalid issuer: {e}")
    except InvalidAudienceError as e:
        raise TokenValidationError(f"Invalid audience: {e}")
    except InvalidSignatureError:
        raise TokenValidationError("Invalid signature (token tampered or wrong key)")
    except DecodeError as e:
        raise TokenValidationError(f"Token decode error (malformed JWT): {e}")
    except PyJWKClientError as e:
        raise TokenValidationError(f"Signing key unavailable: {e}")
    except Exception as e:
        logger.error("JWT validation failed: %s", e)
        raise TokenValidationError(f"Token validation failed: {e}")
