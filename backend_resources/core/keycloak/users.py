"""Keycloak user lookups and creation through the Admin REST API."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from backend_resources.core.provider import CreatedUser

from .client import KeycloakClient

logger = logging.getLogger(__name__)


class KeycloakAdminProvider:
    """IdentityProvider backed by the Keycloak Admin API.

    Authentication is deferred to the first call so that building the
    application never needs a reachable Keycloak.
    """

    def __init__(
        self,
        client: KeycloakClient,
        realm: str,
        *,
        service_realm: Optional[str] = None,
        client_id: str = "",
        client_secret: str = "",
        admin_username: str = "",
        admin_password: str = "",
    ):
        """Initialize the provider.

        Args:
            client: Keycloak HTTP client (authenticated or not)
            realm: Realm holding the managed users
            service_realm: Realm of the service-account client (defaults to realm)
            client_id: Service account client ID
            client_secret: Service account client secret; preferred when set
            admin_username: Admin username used when no client secret is set
            admin_password: Admin password used when no client secret is set
        """
        self.client = client
        self.realm = realm
        self._service_realm = service_realm or realm
        self._client_id = client_id
        self._client_secret = client_secret
        self._admin_username = admin_username
        self._admin_password = admin_password

    def _users_path(self, user_id: Optional[str] = None) -> str:
        path = f"/admin/realms/{self.realm}/users"
        if user_id is not None:
            path = f"{path}/{quote(user_id, safe='')}"
        return path

    def _ensure_client(self) -> KeycloakClient:
        if self.client.is_authenticated:
            return self.client
        if self._client_secret:
            self.client.authenticate_service_account(self._service_realm, self._client_id, self._client_secret)
        elif self._admin_username:
            self.client.authenticate_admin(self._admin_username, self._admin_password)
        return self.client

    def create_user(self, representation: Dict[str, Any]) -> CreatedUser:
        resp = self._ensure_client().post(self._users_path(), json=representation)
        return CreatedUser(status=resp.status_code, location=resp.headers.get("Location"))

    def get_user(self, user_id: str) -> Dict[str, Any]:
        resp = self._ensure_client().get(self._users_path(user_id))
        return resp.json()

    def get_role_mappings(self, user_id: str) -> List[Dict[str, Any]]:
        """Return the realm-level role mappings; client mappings are dropped."""
        resp = self._ensure_client().get(f"{self._users_path(user_id)}/role-mappings")
        mappings = resp.json() or {}
        return mappings.get("realmMappings") or []

    def get_groups(self, user_id: str) -> List[Dict[str, Any]]:
        resp = self._ensure_client().get(f"{self._users_path(user_id)}/groups")
        return resp.json() or []
