"""
Configuration Management

Centralized configuration using Pydantic Settings.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from universe.errors import database_url_missing


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Universe Catalog"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", validation_alias="ENV")
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: Optional[str] = None
    test_database_url: Optional[str] = None
    db_pool_size: int = 5

    # Compound directory
    pubchem_base_url: str = "https://pubchem.ncbi.nlm.nih.gov/rest/pug_view/data/compound"
    pubchem_timeout: float = 10.0

    def active_database_url(self) -> str:
        """Return the database URL for the current environment."""
        url = self.test_database_url if self.environment == "test" else self.database_url
        if not url:
            raise database_url_missing(self.environment)
        return url


# Global settings instance
settings = Settings()
