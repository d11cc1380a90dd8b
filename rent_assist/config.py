"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./rent_assist.db"

    # Payment gateway (server-side verification function)
    payment_verify_url: str = "http://localhost:54321/functions/v1/verify-payment"
    payment_gateway_secret: str = ""

    # Service
    service_name: str = "rent-assist"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0
    verify_max_retries: int = 3
    verify_backoff_base: float = 0.5  # Exponential backoff base in seconds


settings = Settings()
