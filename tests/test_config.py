"""Configuration Tests."""

from knock_config.models import Config, ToolkitConfig
from knock_config.settings import Settings


def test_settings_load_defaults(monkeypatch):
    """Test settings load with defaults."""
    monkeypatch.delenv("KNOCK_SERVICE_TOKEN", raising=False)
    monkeypatch.delenv("KNOCK_ENVIRONMENT", raising=False)
    settings = Settings(_env_file=None)

    assert settings.KNOCK_SERVICE_TOKEN == ""
    assert settings.KNOCK_ENVIRONMENT == "development"
    assert settings.KNOCK_API_URL == "https://api.knock.app/v1"
    assert settings.KNOCK_STRICT_PERMISSIONS is False


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("KNOCK_SERVICE_TOKEN", "sk_env")
    monkeypatch.setenv("KNOCK_STRICT_PERMISSIONS", "true")
    settings = Settings(_env_file=None)

    assert settings.KNOCK_SERVICE_TOKEN == "sk_env"
    assert settings.KNOCK_STRICT_PERMISSIONS is True


def test_config_from_settings_applies_overrides():
    settings = Settings(
        _env_file=None,
        KNOCK_SERVICE_TOKEN="sk_env",
        KNOCK_USER_ID="user_env",
        KNOCK_ENVIRONMENT="staging",
    )

    config = Config.from_settings(settings, user_id="user_cli", tenant_id=None)

    assert config.service_token == "sk_env"
    assert config.user_id == "user_cli"
    assert config.tenant_id is None
    assert config.environment == "staging"


def test_empty_service_token_becomes_none():
    config = Config.from_settings(Settings(_env_file=None, KNOCK_SERVICE_TOKEN=""))
    assert config.service_token is None


def test_resolve_environment_order():
    assert Config().resolve_environment() == "development"
    assert Config(environment="staging").resolve_environment() == "staging"
    assert Config(environment="staging").resolve_environment("production") == "production"


def test_toolkit_config_defaults_to_empty_grant():
    config = ToolkitConfig(service_token="sk_test")
    assert config.permissions == {}
    assert config.hide_user_data is False
