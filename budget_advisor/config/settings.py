"""
Configuration Management for the Budget Advisor

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The allocation thresholds themselves (0.36 debt ratio, 0.2 cash ratio...)
are part of the engine's contract and are NOT configurable; settings only
cover presentation defaults and validation tolerances.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdvisorSettings(BaseSettings):
    """Financial advisor configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ADVISOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: str = Field(
        default="$",
        min_length=1,
        max_length=10,
        description="Currency symbol used when none is given"
    )

    # Validation thresholds
    max_emergency_target_months: int = Field(
        default=24,
        ge=1,
        le=120,
        description="Emergency targets above this many months are flagged"
    )
    goal_past_due_grace_days: int = Field(
        default=0,
        ge=0,
        description="How many days past its target date a goal can be before it is flagged"
    )

    # Budget insights
    near_limit_threshold: float = Field(
        default=0.8,
        gt=0.0,
        lt=1.0,
        description="Share of a category budget at which it counts as near the limit"
    )


class LedgerSettings(BaseSettings):
    """Allocation ledger configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    seed_default_categories: bool = Field(
        default=True,
        description="Create the default investment categories for a new ledger"
    )
    default_categories: str = Field(
        default="S&P 500,Nasdaq,Bitcoin,Money Market Fund,Stocks",
        description="Comma-separated list of default category names"
    )

    @field_validator('default_categories')
    @classmethod
    def validate_default_categories(cls, v: str) -> str:
        """Reject a list that contains only separators."""
        if not any(name.strip() for name in v.split(",")):
            raise ValueError("default_categories must name at least one category")
        return v

    @property
    def default_categories_list(self) -> list[str]:
        """Get default category names as a list."""
        return [name.strip() for name in self.default_categories.split(",") if name.strip()]


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
    )

    @property
    def effective_log_level(self) -> str:
        """Debug mode forces DEBUG logging."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def advisor(self) -> AdvisorSettings:
        return AdvisorSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries describing failures.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("advisor", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
