import pytest

from app_settings import DEFAULT_DATA_FILE, DEFAULT_OPENAI_MODEL, AppSettings, load_settings


class BrokenSecrets:
    def get(self, key, default=None):
        raise FileNotFoundError("No secrets.toml found")


def test_defaults_without_configuration():
    settings = load_settings(secrets=None, env={})
    assert settings.data_source == "memory"
    assert settings.data_file == DEFAULT_DATA_FILE
    assert settings.openai_model == DEFAULT_OPENAI_MODEL
    assert settings.ai_enabled is False


def test_secrets_take_precedence_over_env():
    settings = load_settings(
        secrets={"SURVEY_DATA_SOURCE": "Supabase", "SUPABASE_URL": " https://x.supabase.co "},
        env={"SURVEY_DATA_SOURCE": "local", "SUPABASE_KEY": "anon", "LOG_LEVEL": "debug"},
    )
    assert settings.data_source == "supabase"
    assert settings.supabase_url == "https://x.supabase.co"
    assert settings.supabase_key == "anon"
    assert settings.log_level == "DEBUG"


def test_unreadable_secrets_fall_back_to_env():
    settings = load_settings(secrets=BrokenSecrets(), env={"OPENAI_API_KEY": "sk-test", "APP_URL": "https://app"})
    assert settings.ai_enabled
    assert settings.app_url == "https://app"


def test_unknown_data_source_rejected():
    with pytest.raises(ValueError):
        AppSettings(data_source="firebase")
    with pytest.raises(ValueError):
        load_settings(env={"SURVEY_DATA_SOURCE": "browser"})
