from dataclasses import dataclass

import pytest
import structlog
from structlog.testing import capture_logs

from objmapper import MapperSettings, TypeMismatchError
from objmapper.mapping import ConverterRegistry
from objmapper.observability import configure_from_settings, get_logger


@dataclass
class Source:
    value: str = ""


@dataclass
class Destination:
    value: int = 0


def test_registration_is_logged():
    registry = ConverterRegistry()

    with capture_logs() as logs:
        registry.add(str, int, int)
        registry.add(str, int, int)

    assert [entry["event"] for entry in logs] == ["Type converter registered"] * 2
    assert [entry["replaced"] for entry in logs] == [False, True]
    assert all(entry["log_level"] == "debug" for entry in logs)


def test_aborted_mapping_is_logged(mapper):
    with capture_logs() as logs:
        with pytest.raises(TypeMismatchError):
            mapper.map(Source("x"), Destination())

    [entry] = logs
    assert entry["event"] == "Mapping aborted"
    assert entry["code"] == "type_mismatch"
    assert entry["path"] == "value"


def test_successful_mapping_logs_nothing(mapper):
    with capture_logs() as logs:
        mapper.map(Destination(1), Destination())

    assert logs == []


@pytest.mark.parametrize("json_logs", [True, False])
def test_configure_from_settings(json_logs):
    try:
        configure_from_settings(MapperSettings(_env_file=None, LOG_LEVEL="DEBUG", JSON_LOGS=json_logs))
        get_logger("objmapper.tests").debug("configured")
    finally:
        structlog.reset_defaults()
