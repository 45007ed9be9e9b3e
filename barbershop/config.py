# barbershop/config.py

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./barbershop.db"
    sql_echo: bool = False

    # All "today" / "now" decisions are made in this timezone
    timezone: str = "Asia/Manila"

    # Booking grid: slot_start inclusive, slot_end exclusive
    slot_start: str = Field(default="10:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    slot_end: str = Field(default="22:00", pattern=r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$")
    slot_minutes: int = Field(default=30, gt=0, le=240)

    no_preference_id: str = "no_preference"
    booking_horizon_days: int = Field(default=30, gt=0)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BARBERSHOP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
