"""Core Business Logic Module

Framework-independent logic for the users API (no Flask imports here).

Module Structure:
    - keycloak/         : Keycloak Admin API client and IdentityProvider implementation
    - provider.py       : IdentityProvider protocol (the provider boundary)
    - user_service.py   : UserService and ProvisioningError
    - user_mapper.py    : API shapes <-> Keycloak representations
    - models.py         : UserCreateRequest, UserProfile
    - validators.py     : Request body validation
    - rbac.py           : Principal, role extraction, route policies
"""
