"""
Configuration management using Pydantic

This module provides simulation-wide configuration using Pydantic BaseSettings
with support for environment variables and type validation.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Simulation configuration settings.

    All settings can be overridden using environment variables.
    For example, ECONSIM_LOG_LEVEL will override log_level.
    """

    model_config = SettingsConfigDict(
        env_prefix="ECONSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Market Parameters
    max_order_size: int = Field(
        default=1_000_000,
        gt=0,
        description="Maximum size of a single order"
    )
    max_price: int = Field(
        default=1_000_000_000,
        gt=0,
        description="Maximum acceptable price"
    )
    trade_journal_size: int = Field(
        default=10_000,
        gt=0,
        description="Number of recent trades kept in memory per market"
    )

    # Agent Parameters
    price_increment: int = Field(
        default=1,
        gt=0,
        description="Step used by agents when adjusting prices and wages"
    )
    initial_wage: int = Field(default=10, gt=0, description="Starting wage offered by firms")
    initial_price: int = Field(default=10, gt=0, description="Starting price asked by firms")
    default_tech: float = Field(default=10.0, gt=0, description="Production technology multiplier")
    default_scale: float = Field(
        default=0.5,
        gt=0,
        lt=1,
        description="Returns-to-scale exponent of the production function"
    )
    household_labour_supply: int = Field(
        default=8,
        gt=0,
        description="Units of labour each household offers per period"
    )
    household_reservation_wage: int = Field(
        default=5,
        ge=0,
        description="Lowest wage a household accepts"
    )
    household_demand: int = Field(
        default=10,
        gt=0,
        description="Units of each consumer good a household bids for"
    )
    household_budget: int = Field(
        default=200,
        gt=0,
        description="Spending per consumer good per period"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for log files (console only when unset)"
    )
    use_json_logs: bool = Field(
        default=False,
        description="Emit structured JSON log records"
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings instance
    """
    return settings
