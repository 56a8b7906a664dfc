"""
Application configuration.

Values come from environment variables (a local .env file is loaded first).
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rentdesk.db")
    DATABASE_ECHO = _as_bool(os.getenv("DATABASE_ECHO", "false"))

    # App
    DEBUG = _as_bool(os.getenv("DEBUG", "false"))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")

    # Auth
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # First admin, created at startup when both are set
    ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

    # Monthly invoice job (1st of month, 02:00 by default)
    SCHEDULER_ENABLED = _as_bool(os.getenv("SCHEDULER_ENABLED", "true"))
    INVOICE_RUN_DAY = int(os.getenv("INVOICE_RUN_DAY", "1"))
    INVOICE_RUN_HOUR = int(os.getenv("INVOICE_RUN_HOUR", "2"))
    INVOICE_RUN_MINUTE = int(os.getenv("INVOICE_RUN_MINUTE", "0"))

    # Notification webhook (optional)
    NOTIFY_WEBHOOK_URL = os.getenv("NOTIFY_WEBHOOK_URL", "")
    NOTIFY_WEBHOOK_TIMEOUT = float(os.getenv("NOTIFY_WEBHOOK_TIMEOUT", "3.0"))

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
