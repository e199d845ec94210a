"""
Environment-aware configuration.
Values come from the process environment, optionally seeded from a .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///auth-service.db")
    SQLALCHEMY_ECHO = _env_bool("SQLALCHEMY_ECHO", False)

    # CORS: the customer-facing UI and the admin UI, both sending cookies
    CLIENT_UI = os.getenv("CLIENT_UI", "http://localhost:5173")
    ADMIN_UI = os.getenv("ADMIN_UI", "http://localhost:3000")

    # Token signing. PEM text takes precedence over the path.
    JWT_ISSUER = os.getenv("JWT_ISSUER", "auth-service")
    JWT_KEY_ID = os.getenv("JWT_KEY_ID", "auth-service")
    PRIVATE_KEY = os.getenv("PRIVATE_KEY")
    PRIVATE_KEY_PATH = os.getenv("PRIVATE_KEY_PATH", "certs/private.pem")
    PUBLIC_KEY = os.getenv("PUBLIC_KEY")
    PUBLIC_KEY_PATH = os.getenv("PUBLIC_KEY_PATH")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")

    COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN")
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-me")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef"


class ProductionConfig(BaseConfig):
    DEBUG = False
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", True)


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
