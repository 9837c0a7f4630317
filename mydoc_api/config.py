"""
Configuration module for MyDocAppointment API

Settings are read from environment variables (and a local .env file)
using Pydantic Settings.
"""

from typing import List, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings and configuration."""

    # Database Configuration
    database_url: Optional[str] = Field(default=None)
    db_user: str = Field(default="mydoc_admin")
    db_password: str = Field(default="mydoc")
    db_host: str = Field(default="localhost")
    db_port: str = Field(default="5432")
    db_name: str = Field(default="mydocappointment")
    sql_echo: bool = Field(default=False)

    # Application Configuration
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000)

    # API Configuration
    api_title: str = Field(default="MyDocAppointment API")
    api_description: str = Field(default="A REST API for managing doctor appointments")
    api_version: str = Field(default="1.0.0")

    # CORS Configuration
    allowed_origins: List[str] = Field(
        default=[
            "http://localhost:4200",
            "https://mydocappointmentfe.web.app",
            "https://mydocappointmentfe.firebaseapp.com",
        ]
    )

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def sqlalchemy_url(self) -> str:
        """Return DATABASE_URL, or a PostgreSQL URL built from the DB_* fields."""
        if self.database_url:
            return self.database_url
        # URL encode password
        encoded_pass = quote_plus(self.db_password)
        return f"postgresql://{self.db_user}:{encoded_pass}@{self.db_host}:{self.db_port}/{self.db_name}"


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
