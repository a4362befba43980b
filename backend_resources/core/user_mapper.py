"""Transformations between the users API shapes and Keycloak representations.

Usage:
    # API -> Keycloak
    representation = UserMapper.request_to_representation(request)

    # Keycloak -> API
    profile = UserMapper.representation_to_profile(kc_user, realm_roles, groups)
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from .models import UserCreateRequest, UserProfile


class UserMapper:
    """Maps UserCreateRequest/UserProfile to and from Keycloak JSON."""

    @staticmethod
    def password_credential(password: str) -> Dict[str, Any]:
        """Build a permanent (non-temporary) password credential."""
        return {
            "type": "password",
            "value": password,
            "temporary": False,
        }

    @staticmethod
    def request_to_representation(request: UserCreateRequest) -> Dict[str, Any]:
        """Convert a validated create request to a Keycloak UserRepresentation.

        Example:
            >>> req = UserCreateRequest("alice", "alice@example.com", "Alice", "Smith", "s3cret")
            >>> rep = UserMapper.request_to_representation(req)
            >>> rep["enabled"], len(rep["credentials"])
            (True, 1)
        """
        return {
            "username": request.username,
            "email": request.email,
            "firstName": request.first_name,
            "lastName": request.last_name,
            "enabled": True,
            "credentials": [UserMapper.password_credential(request.password)],
        }

    @staticmethod
    def _names(records: Optional[Iterable[Dict[str, Any]]]) -> List[str]:
        # Keeps provider order; records without a name are skipped
        return [record["name"] for record in records or [] if record.get("name")]

    @staticmethod
    def representation_to_profile(
        kc_user: Dict[str, Any],
        realm_roles: Optional[Iterable[Dict[str, Any]]],
        groups: Optional[Iterable[Dict[str, Any]]],
    ) -> UserProfile:
        """Assemble a UserProfile from a Keycloak user, its realm roles and groups."""
        return UserProfile(
            first_name=kc_user.get("firstName") or "",
            last_name=kc_user.get("lastName") or "",
            email=kc_user.get("email") or "",
            roles=UserMapper._names(realm_roles),
            groups=UserMapper._names(groups),
        )
