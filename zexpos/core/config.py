import os
from decimal import Decimal
from typing import List
from dotenv import load_dotenv

# grab env vars from .env file
load_dotenv()


class Settings:
    # app settings
    APP_ENV: str = os.getenv("APP_ENV", "dev")
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_very_long")
    ACCESS_TOKEN_EXPIRES_MIN: int = int(os.getenv("ACCESS_TOKEN_EXPIRES_MIN", "720"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS stuff
    _origins_raw: str = os.getenv("ALLOWED_ORIGINS", "*")
    ALLOWED_ORIGINS: List[str] = [o.strip() for o in _origins_raw.split(",") if o.strip()] if _origins_raw else ["*"]

    # database config with separate creds
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "zexpos")
    DB_USER: str = os.getenv("DB_USER", "zexpos_user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSL_MODE: str = os.getenv("DB_SSL_MODE", "prefer")
    DB_CONNECTION_TIMEOUT: int = int(os.getenv("DB_CONNECTION_TIMEOUT", "30"))
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))

    @property
    def DATABASE_URL(self) -> str:
        """build DATABASE_URL from individual components or use explicit override"""
        # explicit DATABASE_URL wins (tests point this at sqlite)
        explicit_url = os.getenv("DATABASE_URL")
        if explicit_url:
            return explicit_url

        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSL_MODE}&connect_timeout={self.DB_CONNECTION_TIMEOUT}"
        )

    # pricing
    TAX_RATE: Decimal = Decimal(os.getenv("TAX_RATE", "0.10"))
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")

    # receipt footer defaults
    RECEIPT_THANK_YOU: str = os.getenv("RECEIPT_THANK_YOU", "Thank you for dining with us!")
    RECEIPT_RETURN_POLICY: str = os.getenv(
        "RECEIPT_RETURN_POLICY",
        "No returns on food items. Please speak to a manager for any concerns.",
    )

    # first super admin, used by scripts/init_db.py
    INITIAL_SUPER_ADMIN_EMAIL: str | None = os.getenv("INITIAL_SUPER_ADMIN_EMAIL")
    INITIAL_SUPER_ADMIN_PASSWORD: str | None = os.getenv("INITIAL_SUPER_ADMIN_PASSWORD")
    INITIAL_SUPER_ADMIN_NAME: str = os.getenv("INITIAL_SUPER_ADMIN_NAME", "System Administrator")


settings = Settings()
