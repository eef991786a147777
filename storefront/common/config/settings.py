"""Application settings and environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    CATALOG_API_BASE_URL: str = os.getenv("CATALOG_API_BASE_URL", "http://localhost:8080/api")
    CATALOG_API_TIMEOUT: float = float(os.getenv("CATALOG_API_TIMEOUT", "30"))
    CATALOG_API_MAX_RETRIES: int = int(os.getenv("CATALOG_API_MAX_RETRIES", "3"))

    PLACEHOLDER_IMAGE_URL: str = os.getenv(
        "PLACEHOLDER_IMAGE_URL", "https://placehold.co/400x400/E0E0E0/808080?text=No+Image"
    )

    # Durable cart storage
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", ".storefront")
    CART_STORAGE_KEY: str = os.getenv("CART_STORAGE_KEY", "cart")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL


settings = Settings()
