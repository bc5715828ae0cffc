"""Application settings and environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_DATABASE: str = os.getenv("DB_NAME", "item_storage_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # Listing defaults
    ITEM_DEFAULT_PAGE_SIZE: int = int(os.getenv("ITEM_DEFAULT_PAGE_SIZE", "20"))

    # Optimistic write attempts per stock mutation before giving up
    STOCK_WRITE_MAX_RETRIES: int = int(os.getenv("STOCK_WRITE_MAX_RETRIES", "5"))

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL


settings = Settings()
