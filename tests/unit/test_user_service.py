"""
Unit tests for backend_resources/core/user_service.py

Covers the mapping to and from Keycloak representations and the
error-translation policy (every provider fault -> ProvisioningError).
"""
from unittest.mock import create_autospec

import pytest
import requests

from backend_resources.core.keycloak import KeycloakAdminProvider, KeycloakAPIError
from backend_resources.core.models import UserCreateRequest, UserProfile
from backend_resources.core.provider import CreatedUser
from backend_resources.core.user_service import ProvisioningError, UserService


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def provider():
    mock = create_autospec(KeycloakAdminProvider, instance=True)
    mock.create_user.return_value = CreatedUser(status=201, location="/admin/realms/demo/users/123")
    return mock


@pytest.fixture
def service(provider):
    return UserService(provider)


@pytest.fixture
def create_request():
    return UserCreateRequest(
        username="test",
        email="test@test.com",
        first_name="test",
        last_name="test",
        password="test",
    )


# ============================================================================
# create_user
# ============================================================================

def test_create_user_submits_valid_representation(service, provider, create_request):
    service.create_user(create_request)

    provider.create_user.assert_called_once()
    user = provider.create_user.call_args.args[0]
    assert user["username"] == "test"
    assert user["email"] == "test@test.com"
    assert user["firstName"] == "test"
    assert user["lastName"] == "test"
    assert user["enabled"] is True
    assert len(user["credentials"]) == 1
    credential = user["credentials"][0]
    assert credential == {"type": "password", "value": "test", "temporary": False}


def test_create_user_logs_created_id(service, create_request, caplog):
    with caplog.at_level("INFO", logger="backend_resources.core.user_service"):
        service.create_user(create_request)

    assert "Created user 'test' (id=123)" in caplog.text
    assert "test@test.com" not in caplog.text


@pytest.mark.parametrize(
    "fault",
    [
        KeycloakAPIError(409, "User exists with same username", "/admin/realms/demo/users"),
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
        RuntimeError("boom"),
    ],
)
def test_create_user_wraps_provider_faults(service, provider, create_request, fault):
    provider.create_user.side_effect = fault

    with pytest.raises(ProvisioningError) as exc:
        service.create_user(create_request)

    assert exc.value.status == 500
    assert exc.value.message == "Failed to create user 'test'"
    assert exc.value.__cause__ is fault


@pytest.mark.parametrize("status", [200, 204, 302])
def test_create_user_rejects_non_created_status(service, provider, create_request, status):
    provider.create_user.return_value = CreatedUser(status=status)

    with pytest.raises(ProvisioningError) as exc:
        service.create_user(create_request)

    assert f"provider answered {status}" in exc.value.message


def test_create_user_malformed_result_is_wrapped(service, provider, create_request):
    provider.create_user.return_value = None

    with pytest.raises(ProvisioningError):
        service.create_user(create_request)


# ============================================================================
# get_user_by_id
# ============================================================================

def test_get_user_by_id_assembles_profile(service, provider):
    provider.get_user.return_value = {
        "id": "8c1f0f2e",
        "username": "test",
        "email": "test@test.com",
        "firstName": "test",
        "lastName": "test",
    }
    provider.get_role_mappings.return_value = [{"name": "test_role", "composite": False}]
    provider.get_groups.return_value = [{"id": "g-1", "name": "test_group"}]

    result = service.get_user_by_id("8c1f0f2e")

    assert result == UserProfile(
        first_name="test",
        last_name="test",
        email="test@test.com",
        roles=["test_role"],
        groups=["test_group"],
    )
    provider.get_user.assert_called_once_with("8c1f0f2e")
    provider.get_role_mappings.assert_called_once_with("8c1f0f2e")
    provider.get_groups.assert_called_once_with("8c1f0f2e")


def test_get_user_by_id_keeps_provider_order(service, provider):
    provider.get_user.return_value = {"firstName": "A", "lastName": "B", "email": "a@b.io"}
    provider.get_role_mappings.return_value = [{"name": "zeta"}, {"name": "alpha"}, {"name": "mu"}]
    provider.get_groups.return_value = [{"name": "ops"}, {"name": "dev"}]

    result = service.get_user_by_id("u1")

    assert result.roles == ["zeta", "alpha", "mu"]
    assert result.groups == ["ops", "dev"]


@pytest.mark.parametrize("empty", [None, []])
def test_get_user_by_id_missing_roles_and_groups_degrade_to_empty(service, provider, empty):
    provider.get_user.return_value = {"firstName": "A", "lastName": "B", "email": "a@b.io"}
    provider.get_role_mappings.return_value = empty
    provider.get_groups.return_value = empty

    result = service.get_user_by_id("u1")

    assert result.roles == []
    assert result.groups == []


@pytest.mark.parametrize(
    "fault",
    [
        RuntimeError("boom"),
        KeycloakAPIError(404, "User not found", "/admin/realms/demo/users/u1"),
        requests.ConnectionError("connection refused"),
    ],
)
def test_get_user_by_id_wraps_provider_faults(service, provider, fault):
    provider.get_user.side_effect = fault

    with pytest.raises(ProvisioningError) as exc:
        service.get_user_by_id("u1")

    assert exc.value.status == 500
    assert exc.value.__cause__ is fault


def test_get_user_by_id_wraps_role_lookup_fault(service, provider):
    provider.get_user.return_value = {"firstName": "A"}
    provider.get_role_mappings.side_effect = KeycloakAPIError(403, "Forbidden", "/role-mappings")

    with pytest.raises(ProvisioningError):
        service.get_user_by_id("u1")

    provider.get_groups.assert_not_called()


def test_get_user_by_id_wraps_mapping_fault(service, provider):
    provider.get_user.return_value = None
    provider.get_role_mappings.return_value = []
    provider.get_groups.return_value = []

    with pytest.raises(ProvisioningError):
        service.get_user_by_id("u1")


def test_provisioning_error_to_dict():
    error = ProvisioningError("Failed to fetch user 'u1'")

    assert error.to_dict() == {"error": "Internal Server Error", "message": "Failed to fetch user 'u1'"}
