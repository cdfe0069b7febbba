from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import quote_plus


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

    # Application
    app_name: str = "URL Shortener"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Storage
    storage_backend: str = "sqlalchemy"  # Options: "sqlalchemy", "memory"
    database_url: str = "sqlite:///./url_shortener.db"

    # Discrete connection parameters (MySQL). When db_host is set they
    # take precedence over database_url.
    db_host: Optional[str] = None
    db_name: str = "url_shortener"
    db_charset: str = "utf8mb4"
    db_user: str = "root"
    db_password: str = ""

    # URL Shortener specific
    base_url: str = "http://shrt.est/"
    short_code_length: int = 6

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def sqlalchemy_database_url(self) -> str:
        """SQLAlchemy URL built from the discrete parameters, or database_url."""
        if not self.db_host:
            return self.database_url

        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{quote_plus(self.db_password)}"
        return (
            f"mysql+pymysql://{credentials}@{self.db_host}/{self.db_name}"
            f"?charset={self.db_charset}"
        )


# Create settings instance
settings = Settings()
