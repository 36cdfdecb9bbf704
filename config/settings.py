# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging
from typing import Any


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    # Extra named cache stores, e.g. CACHE_STORES='{"jobs": "redis://host:6379/2"}'
    CACHE_STORES: dict[str, str] = Field(
        default_factory=dict, validation_alias="CACHE_STORES"
    )

    # Job progress defaults (per job type overrides go through the registry)
    JOB_PROGRESS_CACHE_STORE: str = Field(
        default="default", validation_alias="JOB_PROGRESS_CACHE_STORE"
    )
    JOB_PROGRESS_CACHE_PREFIX: str = Field(
        default="job-progress", validation_alias="JOB_PROGRESS_CACHE_PREFIX"
    )
    JOB_PROGRESS_CACHE_DURATION: int = Field(
        default=60 * 15, ge=1, validation_alias="JOB_PROGRESS_CACHE_DURATION"
    )
    JOB_PROGRESS_CANCEL_THRESHOLD: float = Field(
        default=0.0, ge=0.0, validation_alias="JOB_PROGRESS_CANCEL_THRESHOLD"
    )
    JOB_PROGRESS_AVERAGE_RESOLUTION: str | None = Field(
        default=None, validation_alias="JOB_PROGRESS_AVERAGE_RESOLUTION"
    )
    # Job types exposed over HTTP, with per type overrides, e.g.
    # JOB_PROGRESS_TYPES='{"reports.ExportJob": {"cancel_threshold": 0.5}}'
    JOB_PROGRESS_TYPES: dict[str, dict[str, Any]] = Field(
        default_factory=dict, validation_alias="JOB_PROGRESS_TYPES"
    )

    # CORS
    ALLOWED_ORIGIN: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")

    # Logging knobs
    LOGGER_NAME: str = "job-progress"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    def store_url(self, name: str) -> str:
        if name == "default":
            return self.CACHE_STORES.get(name, self.REDIS_URL)
        try:
            return self.CACHE_STORES[name]
        except KeyError:
            raise KeyError(f"Cache store '{name}' is not configured") from None


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
