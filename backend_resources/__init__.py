"""backend-resources: REST façade over the Keycloak admin API.

To use the Flask app:
    from backend_resources.flask_app import create_app

To use the provisioning service without Flask:
    from backend_resources.core.user_service import UserService, ProvisioningError
"""
# Note: flask_app is not imported here so that core/ stays usable without Flask.
