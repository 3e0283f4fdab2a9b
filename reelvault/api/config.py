"""
Environment-aware configuration.
Signing secrets, token lifetimes, cookie flags and password hashing cost.
Development and testing fall back to fixed signing secrets; every other
environment must supply both secrets or create_app() refuses to start.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present

DEV_ACCESS_SECRET = "dev-access-secret-change-me-0123456789"
DEV_REFRESH_SECRET = "dev-refresh-secret-change-me-0123456789"
# HS256 keys below this length draw PyJWT InsecureKeyLengthWarning
MIN_SECRET_BYTES = 32


class ConfigError(RuntimeError):
    """Raised when the app is configured unsafely for its environment."""


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///reelvault.db")
    SQL_ECHO = _env_bool("SQL_ECHO")

    # One secret per token class; a token signed for one never verifies for the other
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "reelvault")
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=7)

    REFRESH_COOKIE_NAME = "refreshToken"
    COOKIE_SECURE = False

    # argon2id cost; defaults match argon2-cffi's RFC 9106 low-memory profile
    PASSWORD_HASH_TIME_COST = int(os.getenv("PASSWORD_HASH_TIME_COST", "3"))
    PASSWORD_HASH_MEMORY_COST = int(os.getenv("PASSWORD_HASH_MEMORY_COST", "65536"))
    PASSWORD_HASH_PARALLELISM = int(os.getenv("PASSWORD_HASH_PARALLELISM", "4"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    APP_ENV = "dev"
    JWT_ACCESS_SECRET = BaseConfig.JWT_ACCESS_SECRET or DEV_ACCESS_SECRET
    JWT_REFRESH_SECRET = BaseConfig.JWT_REFRESH_SECRET or DEV_REFRESH_SECRET


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "testing"
    DATABASE_URL = "sqlite://"
    JWT_ACCESS_SECRET = "test-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
    # Cheap hashing keeps the suite fast
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 1024
    PASSWORD_HASH_PARALLELISM = 1


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "production"
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", "1")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/testing/prod).
    Unknown names raise ConfigError rather than falling back to development.
    """
    env = (name or os.getenv("APP_ENV") or "dev").strip().lower()
    if env in ["dev", "development"]:
        return DevelopmentConfig
    if env in ["test", "testing"]:
        return TestingConfig
    if env in ["prod", "production"]:
        return ProductionConfig
    raise ConfigError(f"Unknown APP_ENV {env!r}; expected dev, testing or production")


def validate_config(config) -> None:
    """
    Refuse unsafe signing setups outside development/testing.
    `config` is any mapping with the keys above (e.g. app.config).
    """
    if config.get("APP_ENV") in ("dev", "testing"):
        return
    keys = ("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET")
    missing = [k for k in keys if not config.get(k)]
    if missing:
        raise ConfigError(f"Missing signing secret(s): {', '.join(missing)}")
    short = [k for k in keys if len(config[k].encode()) < MIN_SECRET_BYTES]
    if short:
        raise ConfigError(f"Signing secret(s) shorter than {MIN_SECRET_BYTES} bytes: {', '.join(short)}")
    if config["JWT_ACCESS_SECRET"] == config["JWT_REFRESH_SECRET"]:
        raise ConfigError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")
