"""Configuration loading for the Tally pricing system.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Catalog configuration
    catalog_path: str = Field(
        default="",
        description="JSON file with catalog entries; empty uses the built-in sample catalog",
    )

    # Pricing defaults
    default_tax_percent: Decimal = Field(
        default=Decimal("0"),
        description="Tax percent applied to custom lines when none is given",
    )
    max_lines_per_order: int = Field(
        default=200,
        description="Maximum number of lines on one order",
    )

    # Presentation
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol used on receipts and text output",
    )
    reference_prefix: str = Field(
        default="S",
        description="Prefix for generated order references",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose receipts",
    )

    @field_validator("default_tax_percent")
    @classmethod
    def validate_default_tax(cls, v: Decimal) -> Decimal:
        """Ensure the default tax is a percentage."""
        if not Decimal("0") <= v <= Decimal("100"):
            raise ValueError("default_tax_percent must be between 0 and 100")
        return v

    @field_validator("max_lines_per_order")
    @classmethod
    def validate_max_lines(cls, v: int) -> int:
        """Ensure at least one line is allowed."""
        if v <= 0:
            raise ValueError("max_lines_per_order must be positive")
        return v

    @field_validator("reference_prefix")
    @classmethod
    def validate_reference_prefix(cls, v: str) -> str:
        """Ensure the reference prefix is not blank."""
        if not v.strip():
            raise ValueError("reference_prefix must be a non-empty string")
        return v.strip()


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
