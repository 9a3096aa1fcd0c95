from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "GateLink"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./gatelink.db"

    # Short link generation
    base_url: str = "http://127.0.0.1:8000"
    short_id_length: int = 6
    max_retries: int = 5
    short_id_strategy: str = "nanoid"  # Options: "nanoid", "alphanumeric"

    # Cache settings
    cache_backend: str = "memory"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Cache TTL in seconds (1 hour)

    # CAPTCHA (reCAPTCHA compatible)
    recaptcha_site_key: Optional[str] = None
    recaptcha_secret_key: Optional[str] = None
    recaptcha_verify_url: str = "https://www.google.com/recaptcha/api/siteverify"
    captcha_timeout: float = 10.0

    # Gate page timers (seconds), rendered into the pages only
    gate1_delay_seconds: int = 8
    gate2_delay_seconds: int = 8
    gate3_delay_seconds: int = 5

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


# Create settings instance
settings = Settings()
