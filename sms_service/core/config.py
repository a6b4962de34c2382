import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """SMS client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    SMS_PROVIDER: str = Field(default="ssl")
    SMS_PROVIDER_URL: Optional[str] = Field(default=None)
    SMS_PROVIDER_CONFIG: Annotated[dict[str, str], NoDecode] = Field(default_factory=dict)
    SMS_REQUEST_TIMEOUT: float = Field(default=30.0, ge=1)
    SMS_USE_FALLBACK: bool = Field(default=False)

    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE_PATH: Optional[str] = Field(default=None)

    @field_validator("SMS_PROVIDER", mode="before")
    @classmethod
    def normalize_provider_name(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("SMS_PROVIDER_CONFIG", mode="before")
    @classmethod
    def parse_provider_config(cls, v: Any) -> dict[str, str]:
        if isinstance(v, str):
            v = v.strip().strip("'")
            v = json.loads(v) if v else None
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("SMS_PROVIDER_CONFIG must be a JSON object")
        return {str(key): str(value) for key, value in v.items()}


load_dotenv(ENV_FILE)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
