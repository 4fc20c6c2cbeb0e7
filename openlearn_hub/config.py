import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_url: str = Field("http://localhost:5000", alias="OPENLEARN_API_URL")
    request_timeout_seconds: float = Field(30.0, alias="OPENLEARN_REQUEST_TIMEOUT_SECONDS", gt=0)
    cache_prefix: str = Field("ohl_cache_", alias="OPENLEARN_CACHE_PREFIX")
    cache_ttl_ms: int = Field(600_000, alias="OPENLEARN_CACHE_TTL_MS", ge=0)
    cache_path: Optional[str] = Field(None, alias="OPENLEARN_CACHE_PATH")
    catalog_path: Optional[str] = Field(None, alias="OPENLEARN_CATALOG_PATH")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def curriculum_api_base(self) -> str:
        return f"{self.api_url.rstrip('/')}/api/curriculum"


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc
