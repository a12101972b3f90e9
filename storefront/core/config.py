"""Storefront Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # LLM Configuration
    anthropic_api_key: Optional[str] = None
    llm_model: str = "claude-3-5-haiku-latest"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 1024
    llm_timeout_seconds: float = 30.0

    # Checkout
    free_shipping_threshold: float = 50.0
    shipping_fee: float = 5.0

    # Assistant tools
    search_result_limit: int = 10
    description_preview_chars: int = 150

    # Chat sessions
    session_max_age_hours: int = 24

    # Cart storage
    cart_storage_key: str = "shopping_cart"
    default_device_id: str = "default"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def llm_configured(self) -> bool:
        """Check if an Anthropic API key is configured"""
        return bool(self.anthropic_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
