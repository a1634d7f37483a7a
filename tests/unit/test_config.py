import pytest
from pydantic import ValidationError

from objmapper import Mapper, MapperSettings, get_settings


def test_defaults(settings):
    assert settings.ACCESSOR_PREFIX == "get_"
    assert settings.MUTATOR_PREFIX == "set_"
    assert settings.LOG_LEVEL == "INFO"
    assert settings.JSON_LOGS is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OBJMAPPER_ACCESSOR_PREFIX", "fetch_")
    monkeypatch.setenv("OBJMAPPER_JSON_LOGS", "true")

    settings = MapperSettings(_env_file=None)

    assert settings.ACCESSOR_PREFIX == "fetch_"
    assert settings.JSON_LOGS is True


def test_empty_prefix_rejected():
    with pytest.raises(ValidationError):
        MapperSettings(_env_file=None, MUTATOR_PREFIX="")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_mapper_defaults_to_cached_settings():
    assert Mapper().settings is get_settings()
