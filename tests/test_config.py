import pytest

from reelvault.api import create_app
from reelvault.api.config import (
    MIN_SECRET_BYTES,
    ConfigError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    validate_config,
)


@pytest.mark.parametrize(
    "name, expected",
    [("prod", ProductionConfig), ("production", ProductionConfig), ("testing", TestingConfig),
     ("dev", DevelopmentConfig), ("development", DevelopmentConfig),
     (" Production ", ProductionConfig)],
)
def test_get_config_by_name(name, expected):
    assert get_config(name) is expected


@pytest.mark.parametrize("name", ["staging", "prd", "anything-else"])
def test_get_config_rejects_unknown_names(name):
    with pytest.raises(ConfigError, match="Unknown APP_ENV"):
        get_config(name)


def test_get_config_falls_back_to_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_config(None) is ProductionConfig


def test_get_config_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_config(None) is DevelopmentConfig


@pytest.mark.parametrize("app_env", ["staging", "production ", "prd"])
def test_unrecognised_app_env_never_starts_on_dev_secrets(tmp_path, monkeypatch, app_env):
    monkeypatch.setenv("APP_ENV", app_env)
    overrides = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'app.db'}",
        "JWT_ACCESS_SECRET": None,
        "JWT_REFRESH_SECRET": None,
    }
    with pytest.raises(ConfigError):
        create_app(None, overrides)


@pytest.mark.parametrize("missing", ["JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET"])
def test_production_refuses_to_start_without_secret(tmp_path, missing):
    overrides = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'prod.db'}",
        "JWT_ACCESS_SECRET": "a" * 32,
        "JWT_REFRESH_SECRET": "b" * 32,
        missing: None,
    }
    with pytest.raises(ConfigError, match=missing):
        create_app("production", overrides)


def test_production_rejects_shared_secret():
    with pytest.raises(ConfigError, match="must differ"):
        validate_config({"APP_ENV": "production", "JWT_ACCESS_SECRET": "s" * 32, "JWT_REFRESH_SECRET": "s" * 32})


def test_production_rejects_short_secret():
    with pytest.raises(ConfigError, match="JWT_REFRESH_SECRET"):
        validate_config({"APP_ENV": "production", "JWT_ACCESS_SECRET": "a" * 32, "JWT_REFRESH_SECRET": "short"})


def test_bundled_secrets_meet_minimum_length():
    for config in (DevelopmentConfig, TestingConfig):
        assert len(config.JWT_ACCESS_SECRET.encode()) >= MIN_SECRET_BYTES
        assert len(config.JWT_REFRESH_SECRET.encode()) >= MIN_SECRET_BYTES


def test_production_sets_secure_cookie(tmp_path):
    app = create_app(
        "production",
        {
            "DATABASE_URL": f"sqlite:///{tmp_path / 'prod.db'}",
            "JWT_ACCESS_SECRET": "a" * 32,
            "JWT_REFRESH_SECRET": "b" * 32,
            "COOKIE_SECURE": True,
        },
    )
    client = app.test_client()
    res = client.post("/auth/register", json={"email": "prod@example.com", "password": "Password1"})
    assert res.status_code == 201
    assert "Secure" in res.headers["Set-Cookie"]


def test_development_falls_back_to_dev_secrets():
    validate_config({"APP_ENV": "dev", "JWT_ACCESS_SECRET": None, "JWT_REFRESH_SECRET": None})
    assert DevelopmentConfig.JWT_ACCESS_SECRET
    assert DevelopmentConfig.JWT_ACCESS_SECRET != DevelopmentConfig.JWT_REFRESH_SECRET
