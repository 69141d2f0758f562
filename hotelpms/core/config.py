"""Application configuration using pydantic-settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = "sqlite:///./data/hotelpms.db"

    # Billing
    default_currency: str = "USD"
    default_tax_rate: float = 0.0  # percentage

    # Document numbering
    booking_prefix: str = "BK"
    invoice_prefix: str = "INV"

    # Logging
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000


settings = Settings()
