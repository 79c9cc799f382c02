"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Core never reads the environment; values are passed into constructors
    - get_settings() is cached (lru_cache): single instance per process
    - min_quantity >= 1 and min_quantity <= max_quantity

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Cart sessions
    cart_ttl_minutes: float = 5
    min_quantity: int = 1
    max_quantity: int = 99
    tax_rate: float = 0.09
    sweep_interval_seconds: float = 60

    @field_validator("cart_ttl_minutes", "sweep_interval_seconds", "tax_rate")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def check_quantity_bounds(self):
        if self.min_quantity < 1:
            raise ValueError("min_quantity must be >= 1")
        if self.min_quantity > self.max_quantity:
            raise ValueError("min_quantity cannot exceed max_quantity")
        return self

    # API
    api_title: str = "Telecom Cart Experience API"
    api_version: str = "1.0.0"
    api_description: str = (
        "A thin API layer for managing non-persistent cart sessions"
    )
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
