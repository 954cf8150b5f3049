"""Runtime settings read from the environment."""
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseModel):
    storage_directory: str = ""
    completion_delay: float = Field(default=1.5, ge=0.0)
    record_store_path: Path | None = None
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def load_settings() -> Settings:
    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    values: dict[str, object] = {
        "storage_directory": os.getenv("NEO_STORAGE_DIRECTORY", ""),
        "log_level": os.getenv("NEO_LOG_LEVEL", "INFO").upper(),
    }
    if origins:
        values["cors_origins"] = origins
    delay = os.getenv("NEO_COMPLETION_DELAY")
    if delay:
        values["completion_delay"] = delay
    store_path = os.getenv("NEO_RECORD_STORE_PATH")
    if store_path:
        values["record_store_path"] = store_path
    return Settings(**values)
