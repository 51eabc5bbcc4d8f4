# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    REDIS_SOCKET_TIMEOUT_SECONDS: float = Field(
        default=5.0, validation_alias="REDIS_SOCKET_TIMEOUT_SECONDS"
    )

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(default=0, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # Object store
    AWS_REGION: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    AWS_ENDPOINT_URL: str = Field(default="", validation_alias="AWS_ENDPOINT_URL")
    S3_BUCKET: str = Field(..., validation_alias="S3_BUCKET")
    S3_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=3.0, validation_alias="S3_CONNECT_TIMEOUT_SECONDS"
    )
    S3_READ_TIMEOUT_SECONDS: float = Field(
        default=10.0, validation_alias="S3_READ_TIMEOUT_SECONDS"
    )
    PRESIGN_TTL_SECONDS: int = Field(default=300, validation_alias="PRESIGN_TTL_SECONDS")

    # Claims
    DEV_BYPASS_AUTH: bool = Field(default=False, validation_alias="DEV_BYPASS_AUTH")
    DEV_BYPASS_HEADER: str = "x-user-sub"
    STRICT_CONTENT_TYPE: bool = Field(
        default=False, validation_alias="STRICT_CONTENT_TYPE"
    )
    EVENTS_TOKEN: str = Field(default="", validation_alias="EVENTS_TOKEN")
    LIST_DEFAULT_LIMIT: int = Field(default=100, validation_alias="LIST_DEFAULT_LIMIT")
    LIST_MAX_LIMIT: int = Field(default=1000, validation_alias="LIST_MAX_LIMIT")

    # Logging knobs
    LOGGER_NAME: str = "claim-upload-portal"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


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
