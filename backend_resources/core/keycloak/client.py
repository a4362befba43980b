"""Low-level HTTP client for Keycloak Admin API.

Handles authentication, token management, and HTTP operations.
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

import requests

from .exceptions import KeycloakAPIError, KeycloakAuthenticationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
# Refresh tokens this long before Keycloak considers them expired
TOKEN_REFRESH_LEEWAY = timedelta(seconds=10)
# Used when the token endpoint omits expires_in
DEFAULT_TOKEN_LIFETIME = 60


class KeycloakClient:
    """HTTP client for Keycloak Admin API with automatic token management.

    Features:
    - Automatic token refresh when expired
    - Centralized error handling
    - Support for both admin and service account authentication

    Usage:
        client = KeycloakClient("http://keycloak:8080")
        client.authenticate_service_account("demo", "backend-resources", "secret")
        response = client.get("/admin/realms/demo/users/<id>")
    """

    def __init__(self, base_url: str, timeout: float = REQUEST_TIMEOUT):
        """Initialize Keycloak client.

        Args:
            base_url: Keycloak base URL (e.g. http://keycloak:8080)
            timeout: Timeout in seconds for every outbound request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_method: Optional[str] = None
        self._auth_params: Dict[str, Any] = {}

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def authenticate_admin(self, username: str, password: str, realm: str = "master") -> str:
        """Authenticate as admin user and store credentials for auto-refresh.

        Args:
            username: Admin username
            password: Admin password
            realm: Authentication realm (default: master)

        Returns:
            Access token
        """
        self._auth_method = "admin"
        self._auth_params = {"username": username, "password": password, "realm": realm}
        return self._refresh_token()

    def authenticate_service_account(self, auth_realm: str, client_id: str, client_secret: str) -> str:
        """Authenticate as service account and store credentials for auto-refresh.

        Args:
            auth_realm: Realm where service account client exists
            client_id: Service account client ID
            client_secret: Service account client secret

        Returns:
            Access token
        """
        self._auth_method = "service_account"
        self._auth_params = {
            "auth_realm": auth_realm,
            "client_id": client_id,
            "client_secret": client_secret,
        }
        return self._refresh_token()

    def _refresh_token(self) -> str:
        if self._auth_method == "admin":
            payload = self._request_token(
                self._auth_params["realm"],
                {
                    "grant_type": "password",
                    "client_id": "admin-cli",
                    "username": self._auth_params["username"],
                    "password": self._auth_params["password"],
                },
            )
        elif self._auth_method == "service_account":
            payload = self._request_token(
                self._auth_params["auth_realm"],
                {
                    "grant_type": "client_credentials",
                    "client_id": self._auth_params["client_id"],
                    "client_secret": self._auth_params["client_secret"],
                },
            )
        else:
            raise KeycloakAuthenticationError(
                "Not authenticated - call authenticate_admin or authenticate_service_account first"
            )

        self._token = payload["access_token"]
        expires_in = payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME
        self._token_expires_at = datetime.now() + timedelta(seconds=int(expires_in))
        logger.debug("Obtained Keycloak token via %s (expires in %ss)", self._auth_method, expires_in)
        return self._token

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._token or not self._token_expires_at:
            self._refresh_token()
            return

        if datetime.now() >= self._token_expires_at - TOKEN_REFRESH_LEEWAY:
            self._refresh_token()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        self._ensure_authenticated()
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {self._token}"

        resp = requests.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        self._handle_error(resp)
        return resp

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request with automatic authentication.

        Raises:
            KeycloakAPIError: On HTTP error
        """
        return self._request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute POST request with automatic authentication.

        Raises:
            KeycloakAPIError: On HTTP error
        """
        return self._request("POST", path, json=json, **kwargs)

    def _request_token(self, realm: str, data: Dict[str, str]) -> Dict[str, Any]:
        """Call the realm token endpoint and return the token payload."""
        url = f"{self.base_url}/realms/{realm}/protocol/openid-connect/token"
        resp = requests.post(url, data=data, timeout=self.timeout)
        if resp.status_code != 200:
            raise KeycloakAPIError(resp.status_code, resp.text, url)
        return resp.json()

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            KeycloakAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise KeycloakAPIError(resp.status_code, resp.text, resp.url)
