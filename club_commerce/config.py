"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CLUB_COMMERCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Club services gateway
    api_base_url: str = "http://localhost:8001"

    # Service
    service_name: str = "club-commerce"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Durable cart
    cart_storage_path: str = ".club_commerce/cart.json"
    cart_storage_key: str = "SHOP_CART"

    # Pricing and reporting
    currency: str = "EUR"
    report_timezone: str = "UTC"
    installment_options: Dict[int, Decimal] = {
        3: Decimal("1.05"),
        6: Decimal("1.10"),
        9: Decimal("1.15"),
        12: Decimal("1.20"),
    }


settings = Settings()
