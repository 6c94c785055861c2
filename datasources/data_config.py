"""
Sample source settings for selecting and configuring the backend that feeds each evaluation cycle

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    SOURCE_BACKEND_SYNTHETIC,
    SOURCE_BACKEND_COLLECTOR,
    APIPULSE_SOURCE_BACKEND,
    APIPULSE_COLLECTOR_URL,
    APIPULSE_CONNECTOR_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    source_backend: str = APIPULSE_SOURCE_BACKEND
    collector_url: str = APIPULSE_COLLECTOR_URL
    collector_path: str = "/samples"
    connector_timeout: int = APIPULSE_CONNECTOR_TIMEOUT
    collector_retry_attempts: int = 2
    collector_retry_delay: float = 0.2

    @field_validator("collector_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).rstrip("/")

    @field_validator("collector_path", mode="before")
    @classmethod
    def leading_slash(cls, v: str) -> str:
        value = str(v or "").strip()
        return value if value.startswith("/") else f"/{value}"

    @field_validator("source_backend", mode="before")
    @classmethod
    def validate_source_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {SOURCE_BACKEND_SYNTHETIC, SOURCE_BACKEND_COLLECTOR}:
            raise ValueError(f"Unsupported source backend: {value!r}")
        return value

    model_config = {"env_prefix": "APIPULSE_", "extra": "ignore"}
