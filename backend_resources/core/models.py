"""Request and response shapes of the users API."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class UserCreateRequest:
    username: str
    email: str
    first_name: str
    last_name: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UserProfile:
    """User profile assembled from the provider at query time."""
    first_name: str
    last_name: str
    email: str
    roles: List[str] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the JSON field names of the HTTP API."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "roles": list(self.roles),
            "groups": list(self.groups),
        }
