import logging

import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from reelvault import __version__
from .config import DEV_ACCESS_SECRET, DEV_REFRESH_SECRET, get_config, validate_config
from .errors import register_error_handlers
from reelvault.models import storage  # DBStorage singleton (scoped_session)

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Reelvault Auth API",
        "version": __version__,
        "description": "Session API for the reelvault movie collection app: "
                       "register, login, refresh-token rotation, logout and current user.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class, before the
    signing-secret check, so tests can build any environment.
    Raises ConfigError when a non-development app lacks its signing secrets.
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    validate_config(app.config)
    if app.config["APP_ENV"] == "dev" and (
        app.config["JWT_ACCESS_SECRET"] == DEV_ACCESS_SECRET
        or app.config["JWT_REFRESH_SECRET"] == DEV_REFRESH_SECRET
    ):
        logger.warning("Using development signing secrets; never deploy this configuration")

    # Cookies only cross origins when the allowed origins are explicit
    origins = app.config.get("CORS_ORIGINS", "*")
    if origins == "*":
        CORS(app, resources={r"/*": {"origins": "*"}})
    else:
        CORS(
            app,
            resources={r"/*": {"origins": [o.strip() for o in origins.split(",") if o.strip()]}},
            supports_credentials=True,
        )

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    storage.configure(app.config["DATABASE_URL"], echo=app.config["SQL_ECHO"])
    storage.reload()

    from .health import bp as health_bp
    from .auth import bp as auth_bp, auth_service

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # Calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Delete refresh token records past their expiry."""
        removed = auth_service.purge_expired_sessions()
        click.echo(f"Removed {removed} expired session(s)")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to the Reelvault Auth API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
