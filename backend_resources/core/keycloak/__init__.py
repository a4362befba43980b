"""Keycloak Admin API client library.

Architecture:
- client.py: HTTP client with authentication and auto-refresh
- users.py: KeycloakAdminProvider (user creation, lookup, role mappings, groups)
- exceptions.py: Typed exceptions for error handling

Usage:
    from backend_resources.core.keycloak import KeycloakClient, KeycloakAdminProvider

    client = KeycloakClient("http://keycloak:8080")
    provider = KeycloakAdminProvider(client, "demo", client_id="backend-resources", client_secret="...")
    user = provider.get_user("0b9e...")
"""
from .client import KeycloakClient, REQUEST_TIMEOUT
from .exceptions import KeycloakError, KeycloakAPIError, KeycloakAuthenticationError
from .users import KeycloakAdminProvider

__all__ = [
    "KeycloakClient",
    "REQUEST_TIMEOUT",
    "KeycloakError",
    "KeycloakAPIError",
    "KeycloakAuthenticationError",
    "KeycloakAdminProvider",
]
