import pytest

from objmapper import Mapper, MapperSettings


@pytest.fixture
def settings():
    return MapperSettings(_env_file=None)


@pytest.fixture
def mapper(settings):
    return Mapper(settings)
