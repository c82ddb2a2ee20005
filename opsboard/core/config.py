"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPSBOARD_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for rotated log files",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Simulation
    tick_interval: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between simulation ticks",
    )
    reply_delay: float = Field(
        default=0.5,
        ge=0,
        description="Simulated latency before the planner reply is appended",
    )
    seed_demo_tasks: bool = Field(
        default=True,
        description="Populate the board with demo tasks on startup",
    )

    # Task defaults
    current_user: str = Field(
        default="You",
        min_length=1,
        description="Owner assigned to tasks created without an explicit user",
    )
    default_llm: str = Field(
        default="GPT-4",
        min_length=1,
        description="Worker-model label used when none can be determined",
    )
    id_start: int = Field(
        default=1000,
        ge=0,
        description="Task ids are issued starting after this value",
    )

    # Dashboard API
    api_host: str = Field(
        default="0.0.0.0",
        description="Host for the dashboard server",
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the dashboard server",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.tick_interval
        1.0
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
