"""
User provisioning service: the integration boundary to Keycloak.

    users blueprint ──> UserService ──> IdentityProvider ──> Keycloak

The service owns the mapping between API shapes and provider
representations, and the error-translation policy: any fault raised while
talking to the provider, or while mapping its answers, leaves this module as
a ProvisioningError. Provider exception types (KeycloakError,
requests.RequestException, ...) never escape.
"""

from __future__ import annotations
import logging
from http import HTTPStatus

from .models import UserCreateRequest, UserProfile
from .provider import IdentityProvider
from .user_mapper import UserMapper

logger = logging.getLogger(__name__)


class ProvisioningError(Exception):
    """Any failure at the identity-provider boundary, with an HTTP status hint."""

    def __init__(self, message: str, status: int = HTTPStatus.INTERNAL_SERVER_ERROR):
        self.status = int(status)
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": HTTPStatus(self.status).phrase,
            "message": self.message,
        }


class UserService:
    """Creates and reads users through an IdentityProvider."""

    def __init__(self, provider: IdentityProvider):
        self.provider = provider

    def create_user(self, request: UserCreateRequest) -> None:
        """Create the user in the provider with a permanent password.

        Raises:
            ProvisioningError: If the provider call fails or does not answer 201
        """
        try:
            representation = UserMapper.request_to_representation(request)
            result = self.provider.create_user(representation)
            status, user_id = result.status, result.user_id
        except Exception as exc:
            logger.exception("Exception on create_user for '%s'", request.username)
            raise ProvisioningError(f"Failed to create user '{request.username}'") from exc

        if status != HTTPStatus.CREATED:
            logger.error("Unexpected status %s creating user '%s'", status, request.username)
            raise ProvisioningError(
                f"Failed to create user '{request.username}': provider answered {status}"
            )

        logger.info("Created user '%s' (id=%s)", request.username, user_id)

    def get_user_by_id(self, user_id: str) -> UserProfile:
        """Fetch a user with its realm roles and groups.

        Raises:
            ProvisioningError: If any lookup fails or the records cannot be mapped
        """
        try:
            kc_user = self.provider.get_user(user_id)
            realm_roles = self.provider.get_role_mappings(user_id)
            groups = self.provider.get_groups(user_id)
            return UserMapper.representation_to_profile(kc_user, realm_roles, groups)
        except Exception as exc:
            logger.exception("Exception on get_user_by_id for '%s'", user_id)
            raise ProvisioningError(f"Failed to fetch user '{user_id}'") from exc
