from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator, model_validator

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def strict_company_id_from_env() -> bool:
    return _env_bool("FISCAL_STRICT_COMPANY_ID", False)


class Settings(BaseModel):
    min_supported_year: int = Field(default_factory=lambda: _env_int("FISCAL_MIN_YEAR", 2015))
    max_supported_year: int = Field(default_factory=lambda: _env_int("FISCAL_MAX_YEAR", 2099))
    strict_company_id: bool = Field(default_factory=strict_company_id_from_env)
    log_dir: str = Field(default_factory=lambda: os.getenv("FISCAL_LOG_DIR", "logs"))
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True)

    @field_validator("min_supported_year", "max_supported_year")
    @classmethod
    def _validate_year(cls, value: int) -> int:
        if value < 1900 or value > 9998:
            raise ValueError(f"Supported year bound out of range: {value}")
        return value

    @model_validator(mode="after")
    def _require_ordered_range(self) -> "Settings":
        if self.min_supported_year > self.max_supported_year:
            raise ValueError(
                f"FISCAL_MIN_YEAR ({self.min_supported_year}) is after FISCAL_MAX_YEAR ({self.max_supported_year})"
            )
        return self

    def supports_year(self, year: int) -> bool:
        return self.min_supported_year <= year <= self.max_supported_year


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
