"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Booking rules
    lead_time_minutes: int = 30  # minimum notice between publish and departure
    start_grace_minutes: int = 30  # how late a trip may still be started
    cancel_grace_minutes: int = 30  # how late an unstarted trip may be cancelled
    allow_overbooking: bool = True  # seat count is a soft cap when enabled

    # Accounts
    account_min_age_days: int = 365

    # API
    rate_limit: str = "100/minute"
    rate_limit_enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8222
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
