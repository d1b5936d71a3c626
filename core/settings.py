# core/settings.py
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Database
    database_url: str = os.getenv("LIBRARY_DATABASE_URL", "sqlite:///library.db")
    sqlite_busy_timeout: float = float(os.getenv("LIBRARY_SQLITE_BUSY_TIMEOUT", "30"))
    storage_retries: int = int(os.getenv("LENDING_STORAGE_RETRIES", "1"))

    # API
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_token: Optional[str] = os.getenv("LIBRARY_API_TOKEN")
    page_size: int = int(os.getenv("LIBRARY_PAGE_SIZE", "10"))
    borrow_rate_limit: int = int(os.getenv("LIBRARY_BORROW_RATE_LIMIT", "100"))
    borrow_rate_window: float = float(os.getenv("LIBRARY_BORROW_RATE_WINDOW", "60"))

    # Logging
    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "INFO")


settings = Settings()
