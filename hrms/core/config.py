from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "HRMS API"
    debug: bool = False

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    algorithm: str = "HS256"

    # Tenant-defined roles, loaded once at startup
    roles_file: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_dir: str = "/var/log/hrms"
    file_logging: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HRMS_",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
