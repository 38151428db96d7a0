"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"
    debug: bool = False

    # Quote provider settings
    quote_provider: str = "alpaca"  # 'alpaca' or 'yahoo'
    alpaca_key_id: Optional[str] = None
    alpaca_secret_key: Optional[str] = None
    alpaca_data_url: str = "https://data.alpaca.markets"
    alpaca_feed: str = "iex"
    yahoo_index_symbols: List[str] = ["GSPC", "DJI", "IXIC", "RUT", "VIX", "NDX"]
    quote_timeout_seconds: float = 10.0

    # Email settings
    email_backend: str = "sendgrid"  # 'sendgrid' or 'smtp'
    email_from_address: Optional[str] = None
    email_from_name: str = "Pricewatch Alerts"
    sendgrid_api_key: Optional[str] = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    email_timeout_seconds: float = 15.0

    # Alert monitoring job settings
    alert_check_hour: int = 21  # UTC, after the US market close
    alert_check_minute: int = 0
    alert_check_interval_minutes: Optional[int] = None
    alert_max_concurrency: int = 5
    scheduler_max_workers: int = 3

    # API settings
    endpoint_host: str = "0.0.0.0"
    endpoint_port: int = 8000
    endpoint_auth_token: Optional[str] = None
    api_reload: bool = False
    api_log_level: str = "INFO"

    # Database settings
    database_url: Optional[str] = None
    data_directory: str = "data"
    database_echo_sql: bool = False
    database_pool_pre_ping: bool = True
    database_pool_recycle: int = 3600

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = True
    log_file_path: str = "data/pricewatch.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("quote_provider")
    @classmethod
    def validate_quote_provider(cls, v):
        """Validate the quote provider name."""
        valid_providers = ["alpaca", "yahoo"]
        if v.lower() not in valid_providers:
            raise ValueError(f"Quote provider must be one of: {valid_providers}")
        return v.lower()

    @field_validator("email_backend")
    @classmethod
    def validate_email_backend(cls, v):
        """Validate the email backend name."""
        valid_backends = ["sendgrid", "smtp"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Email backend must be one of: {valid_backends}")
        return v.lower()

    @field_validator("yahoo_index_symbols")
    @classmethod
    def validate_index_symbols(cls, v):
        """Store index symbols without markers, upper-cased."""
        return [symbol.strip().lstrip("^").upper() for symbol in v if symbol.strip()]

    @field_validator("alert_check_hour")
    @classmethod
    def validate_check_hour(cls, v):
        """Validate the daily run hour."""
        if v < 0 or v > 23:
            raise ValueError("Alert check hour must be between 0 and 23")
        return v

    @field_validator("alert_check_minute")
    @classmethod
    def validate_check_minute(cls, v):
        """Validate the daily run minute."""
        if v < 0 or v > 59:
            raise ValueError("Alert check minute must be between 0 and 59")
        return v

    @field_validator("alert_check_interval_minutes")
    @classmethod
    def validate_interval(cls, v):
        """Validate check interval is reasonable."""
        if v is not None and (v < 1 or v > 1440):  # 1 minute to 24 hours
            raise ValueError("Check interval must be between 1 and 1440 minutes")
        return v

    @field_validator("alert_max_concurrency", "scheduler_max_workers")
    @classmethod
    def validate_positive_workers(cls, v):
        """Concurrency limits must allow at least one worker."""
        if v < 1:
            raise ValueError("Concurrency limits must be at least 1")
        return v

    @field_validator("quote_timeout_seconds", "email_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        """Validate per-call timeouts."""
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @field_validator("endpoint_port", "smtp_port")
    @classmethod
    def validate_port(cls, v):
        """Validate port number is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("log_level", "api_log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def get_database_url(self) -> str:
        """Get the complete database URL."""
        if self.database_url:
            return self.database_url

        # Default to SQLite in data directory
        from pathlib import Path

        db_dir = Path(self.data_directory)
        db_dir.mkdir(exist_ok=True)
        db_path = db_dir / "pricewatch.db"
        return f"sqlite:///{db_path}"

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()


def get_missing_settings(settings: Optional[Settings] = None) -> list[str]:
    """
    List the environment variables the configured backends still need.

    Args:
        settings: Settings to inspect (defaults to the cached settings)

    Returns:
        list: Names of unset environment variables
    """
    settings = settings or get_settings()
    missing = []

    if settings.quote_provider == "alpaca":
        if not settings.alpaca_key_id:
            missing.append("ALPACA_KEY_ID")
        if not settings.alpaca_secret_key:
            missing.append("ALPACA_SECRET_KEY")

    if not settings.email_from_address:
        missing.append("EMAIL_FROM_ADDRESS")
    if settings.email_backend == "sendgrid" and not settings.sendgrid_api_key:
        missing.append("SENDGRID_API_KEY")
    if settings.email_backend == "smtp" and not settings.smtp_host:
        missing.append("SMTP_HOST")

    return missing


def validate_required_settings() -> bool:
    """
    Validate that all required settings are properly configured.

    Returns:
        bool: True if all required settings are valid, False otherwise
    """
    try:
        return not get_missing_settings()
    except Exception as e:
        print(f"Configuration validation failed: {e}")
        return False
