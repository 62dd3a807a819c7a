import pytest

from common.config import DocumentConfig, StorageConfig
from common.config.env import get_env_bool, get_env_int, get_env_list, get_env_str


def test_storage_config_defaults():
    config = StorageConfig.from_env()

    assert config.host == "localhost"
    assert config.port == 5432
    assert config.schema == "public"
    assert config.dsn == "postgresql://cms:@localhost:5432/cms"


def test_storage_config_from_env(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_SCHEMA", "content")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "20")

    config = StorageConfig.from_env()

    assert (config.host, config.port, config.schema) == ("db.internal", 6543, "content")
    assert config.pool_max_size == 20


def test_invalid_integer_is_rejected(monkeypatch):
    monkeypatch.setenv("DB_PORT", "postgres")
    with pytest.raises(ValueError, match="must be an integer"):
        StorageConfig.from_env()


def test_document_config_includes_default_locale(monkeypatch):
    monkeypatch.setenv("CMS_DEFAULT_LOCALE", "nl")
    monkeypatch.setenv("CMS_LOCALES", "en, fr,,")

    config = DocumentConfig.from_env()

    assert config.default_locale == "nl"
    assert config.locales == ("nl", "en", "fr")


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG", " Yes ")
    monkeypatch.setenv("COUNT", "3")
    monkeypatch.setenv("NAMES", "a;b")

    assert get_env_bool("FLAG") is True
    assert get_env_int("COUNT") == 3
    assert get_env_list("NAMES", separator=";") == ["a", "b"]
    assert get_env_str("UNSET_VARIABLE_FOR_TEST", "fallback") == "fallback"
    with pytest.raises(KeyError, match="is required"):
        get_env_str("UNSET_VARIABLE_FOR_TEST", required=True)


def test_invalid_boolean(monkeypatch):
    monkeypatch.setenv("FLAG", "maybe")
    with pytest.raises(ValueError, match="must be a boolean"):
        get_env_bool("FLAG")
