from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_TIMEOUT_MS = 1


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    external_api_base_url: str = Field(default="https://ghibliapi.vercel.app", alias="EXTERNAL_API_BASE_URL")
    local_api_base_url: str = Field(default="http://localhost:8080/api", alias="LOCAL_API_BASE_URL")
    request_timeout_ms: int = Field(default=5000, alias="REQUEST_TIMEOUT_MS")
    external_not_found_triggers_fallback: bool = Field(default=True, alias="EXTERNAL_NOT_FOUND_TRIGGERS_FALLBACK")

    use_local_api: bool = Field(default=False, alias="USE_LOCAL_API")
    backup_dir: Path = Field(default=Path("api-backup"), alias="BACKUP_DIR")
    images_dir: Path = Field(default=Path("public/api-backup/images"), alias="IMAGES_DIR")
    static_root: Path = Field(default=Path("public"), alias="STATIC_ROOT")
    server_host: str = Field(default="127.0.0.1", alias="SERVER_HOST")
    server_port: int = Field(default=8080, alias="SERVER_PORT")

    image_quality: int = Field(default=80, alias="IMAGE_QUALITY")
    crawl_timeout_seconds: float = Field(default=30.0, alias="CRAWL_TIMEOUT_SECONDS")

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        self.external_api_base_url = self.external_api_base_url.strip().rstrip("/")
        self.local_api_base_url = self.local_api_base_url.strip().rstrip("/")
        self.request_timeout_ms = max(self.request_timeout_ms, MIN_TIMEOUT_MS)
        self.image_quality = min(max(self.image_quality, 1), 100)

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
