"""Role-Based Access Control helpers.

Route policies are a small tagged union: every route is either Public,
Authenticated, or RequireRoles. `evaluate_policy` is the only place that
interprets them.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Union


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, derived from validated token claims."""
    name: str
    roles: tuple[str, ...] = field(default_factory=tuple)

    def has_role(self, role: str) -> bool:
        return role.lower() in {r.lower() for r in self.roles}


@dataclass(frozen=True)
class Public:
    """No authentication required."""


@dataclass(frozen=True)
class Authenticated:
    """Any authenticated caller."""


@dataclass(frozen=True)
class RequireRoles:
    """Authenticated caller holding at least one of `roles`."""
    roles: FrozenSet[str]


RoutePolicy = Union[Public, Authenticated, RequireRoles]


class Decision(Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


def require_roles(*roles: str) -> RequireRoles:
    return RequireRoles(frozenset(roles))


def collect_roles(*sources) -> list[str]:
    """Collect realm and client roles from token claims, in first-seen order."""
    roles: list[str] = []
    for source in sources:
        if not isinstance(source, dict):
            continue
        realm_access = source.get("realm_access")
        if isinstance(realm_access, dict):
            roles.extend(r for r in realm_access.get("roles", []) if r not in roles)
        resource_access = source.get("resource_access")
        if isinstance(resource_access, dict):
            for client_access in resource_access.values():
                if not isinstance(client_access, dict):
                    continue
                roles.extend(r for r in client_access.get("roles", []) if r not in roles)
    return roles


def principal_from_claims(claims: dict) -> Principal:
    """Build the Principal from validated access-token claims.

    Raises:
        ValueError: If the claims carry neither preferred_username nor sub
    """
    name = claims.get("preferred_username") or claims.get("sub")
    if not isinstance(name, str) or not name:
        raise ValueError("Token carries no subject")
    return Principal(name=name, roles=tuple(collect_roles(claims)))


def evaluate_policy(policy: RoutePolicy, principal: Principal | None) -> Decision:
    """Decide whether `principal` may call a route guarded by `policy`."""
    if isinstance(policy, Public):
        return Decision.ALLOW
    if principal is None:
        return Decision.UNAUTHENTICATED
    if isinstance(policy, Authenticated):
        return Decision.ALLOW
    if isinstance(policy, RequireRoles):
        if any(principal.has_role(role) for role in policy.roles):
            return Decision.ALLOW
        return Decision.FORBIDDEN
    raise TypeError(f"Unknown route policy: {policy!r}")
