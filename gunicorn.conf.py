"""Gunicorn configuration for the backend-resources API.

Run with:
    gunicorn -c gunicorn.conf.py

Secrets (KEYCLOAK_SERVICE_CLIENT_SECRET, KEYCLOAK_ADMIN_PASSWORD) are read by
the settings loader from /run/secrets or the environment in each worker.
"""
import os

wsgi_app = "backend_resources.flask_app:create_app()"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()


def post_fork(server, worker):
    """Report which provider credentials the worker will use."""
    from pathlib import Path

    secrets_dir = Path("/run/secrets")
    if secrets_dir.is_dir() and any(secrets_dir.glob("keycloak_*")):
        worker.log.info("Keycloak secrets found in /run/secrets")
    elif os.environ.get("KEYCLOAK_SERVICE_CLIENT_SECRET"):
        worker.log.info("Using KEYCLOAK_SERVICE_CLIENT_SECRET from environment")
    elif os.environ.get("DEMO_MODE", "false").lower() == "true":
        worker.log.warning("DEMO_MODE=true: using demo Keycloak admin credentials")
    else:
        worker.log.info("No service account secret; falling back to KEYCLOAK_ADMIN credentials")
