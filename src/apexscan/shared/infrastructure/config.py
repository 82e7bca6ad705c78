"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (``APEXSCAN_`` prefix) and
an optional .env file. Severity thresholds defined here are the defaults for
the severity calculator and the runtime enrichers; every component also
accepts explicit values.
"""

from typing import List

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="APEXSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="apexscan-core", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")

    # Logging / Privacy
    log_redaction_enabled: bool = Field(default=True, description="Enable PII redaction in logs")

    # Runtime severity thresholds
    soql_critical_occurrence_count: int = Field(
        default=10_000_000,
        description="Occurrence count above which a query is critical",
    )
    soql_major_occurrence_count: int = Field(
        default=1_000,
        description="Occurrence count above which a query is major",
    )
    method_critical_avg_cpu_time: float = Field(
        default=2000,
        description="Average entrypoint CPU time above which a method is critical",
    )

    # Static analysis
    assignment_proximity_lines: int = Field(
        default=2,
        ge=0,
        description="Max lines between a variable declaration and the query it receives",
    )
    runtime_identifier_extensions: List[str] = Field(
        default=["cls", "trigger"],
        description="File extensions used in per-query runtime identifiers",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"

    @model_validator(mode="after")
    def _validate_thresholds(self) -> "Settings":
        """Fail fast: thresholds must be ordered."""
        if self.soql_major_occurrence_count >= self.soql_critical_occurrence_count:
            raise ValueError(
                "SOQL_MAJOR_OCCURRENCE_COUNT must be lower than SOQL_CRITICAL_OCCURRENCE_COUNT "
                f"(got {self.soql_major_occurrence_count} >= {self.soql_critical_occurrence_count})"
            )
        if not self.runtime_identifier_extensions:
            raise ValueError("RUNTIME_IDENTIFIER_EXTENSIONS must not be empty")
        return self


# Global settings instance
settings = Settings()
