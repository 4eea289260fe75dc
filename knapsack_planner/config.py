import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Planner settings"""

    # API Configuration
    api_title: str = "Knapsack Planner API"
    api_version: str = "0.1.0"

    log_level: str = Field(default="INFO", description="Root logging level")

    # Optimizer limits
    max_table_cells: int = Field(
        default=50_000_000,
        gt=0,
        description="Upper bound on (tasks + 1) * (budget + 1) DP table cells",
    )

    # Collaborator defaults
    default_time_budget: float = Field(
        default=480, ge=0, description="Default time budget in minutes (8 hours)"
    )
    default_sort_key: str = Field(default="importance")
    default_sort_ascending: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known logging level name"""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = SettingsConfigDict(
        env_prefix="KNAPSACK_PLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
