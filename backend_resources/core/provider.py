"""Narrow interface to the external identity provider.

UserService depends only on this protocol, so the error-translation boundary
has a single surface to guard regardless of which client talks to the
provider.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class CreatedUser:
    """Outcome of a create-user call: HTTP status plus the Location header."""
    status: int
    location: Optional[str] = None

    @property
    def user_id(self) -> Optional[str]:
        """Provider-assigned id, taken from the last Location path segment."""
        if not self.location:
            return None
        return self.location.rstrip("/").rsplit("/", 1)[-1] or None


class IdentityProvider(Protocol):
    def create_user(self, representation: Dict[str, Any]) -> CreatedUser:
        ...

    def get_user(self, user_id: str) -> Dict[str, Any]:
        ...

    def get_role_mappings(self, user_id: str) -> List[Dict[str, Any]]:
        """Realm-level role mappings, in provider order."""
        ...

    def get_groups(self, user_id: str) -> List[Dict[str, Any]]:
        ...
