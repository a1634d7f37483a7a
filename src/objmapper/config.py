# src/objmapper/config.py

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class MapperSettings(BaseSettings):
    """
    Mapper settings (Pydantic v2).

    - Environment keys are prefixed with OBJMAPPER_, e.g. OBJMAPPER_ACCESSOR_PREFIX
    - Prefixes drive accessor/mutator discovery by method name
    """

    # ------------------------------------------------------------------------------------
    # Name conventions
    # ------------------------------------------------------------------------------------
    ACCESSOR_PREFIX: str = Field(default="get_", min_length=1)
    MUTATOR_PREFIX: str = Field(default="set_", min_length=1)

    # ------------------------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------------------------
    LOG_LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=False)

    model_config = {
        "env_prefix": "OBJMAPPER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> MapperSettings:
    return MapperSettings()
