from datetime import timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Wall-clock zone for formatted deadlines, business hours and week boundaries
    display_timezone: str = "UTC"

    model_config = SettingsConfigDict(
        env_prefix="LEVELUP_",
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def display_zone(self) -> tzinfo:
        """Resolve display_timezone, avoiding a tzdata lookup for plain UTC."""
        if self.display_timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.display_timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()
