import logging

import click
from flasgger import Swagger
from flask import Flask
from flask_cors import CORS

from auth_service import __version__
from auth_service.models.db_storage import DBStorage
from auth_service.services.container import EXTENSION_KEY, Services
from auth_service.utils.keys import KeyProvider

from .config import get_config
from .errors import register_error_handlers

# Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Auth Service",
        "version": __version__,
        "description": "Registration, login, token rotation and user/tenant management.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Access token with the `Bearer ` prefix. The accessToken cookie is read first.",
        }
    },
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("auth_service").setLevel(level)


def create_app(
    config_name: str | None = None,
    *,
    config: dict | None = None,
    storage: DBStorage | None = None,
    key_provider: KeyProvider | None = None,
) -> Flask:
    """
    Application factory.
    `config` overrides individual settings; `storage` and `key_provider`
    replace the ones built from configuration.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    if config:
        app.config.update(config)

    configure_logging(app)

    # Cookies are the credential, so origins must be explicit
    origins = [o for o in (app.config.get("CLIENT_UI"), app.config.get("ADMIN_UI")) if o]
    CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQLALCHEMY_ECHO", False))
    storage.reload()
    if key_provider is None:
        key_provider = KeyProvider.from_config(app.config)
    if not (app.debug or app.testing):
        # refuse to start without signing material
        key_provider.validate()
    app.extensions[EXTENSION_KEY] = Services.build(storage, key_provider, issuer=app.config["JWT_ISSUER"])

    from .auth import bp as auth_bp
    from .health import bp as health_bp
    from .jwks import bp as jwks_bp
    from .tenants import bp as tenants_bp
    from .users import bp as users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(tenants_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(jwks_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Auth Service",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    @app.cli.command("purge-refresh-tokens")
    def purge_refresh_tokens():
        """Delete refresh tokens whose expiry has passed."""
        removed = app.extensions[EXTENSION_KEY].token_store.purge_expired()
        click.echo(f"Removed {removed} expired refresh token(s)")

    return app
