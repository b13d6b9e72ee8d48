"""
Configuration Management for the Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger itself has no external dependencies, so configuration is
limited to which categories a form offers and how logging behaves.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_ledger.models.expense import ExpenseCategory


DEFAULT_CATEGORIES = ",".join(category.value for category in ExpenseCategory)


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from LEDGER_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Categories the form offers and the ledger accepts
    categories: str = Field(
        default=DEFAULT_CATEGORIES,
        description="Comma-separated list of accepted expense categories"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Standard library log level name"
    )
    log_json: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console text"
    )

    # Audit trail
    audit_history_size: int = Field(
        default=500,
        ge=0,
        description="How many audit events a session keeps in memory (0 disables)"
    )

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v: str) -> str:
        """Every configured category must be a known ExpenseCategory."""
        names = [name.strip() for name in v.split(",") if name.strip()]
        if not names:
            raise ValueError("At least one expense category must be configured")
        known = {category.value for category in ExpenseCategory}
        unknown = [name for name in names if name not in known]
        if unknown:
            raise ValueError(
                f"Unknown expense categories: {unknown}. Allowed: {sorted(known)}"
            )
        return ",".join(names)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def categories_list(self) -> list[ExpenseCategory]:
        """Get configured categories as enum members, in configured order."""
        return [ExpenseCategory(name) for name in self.categories.split(",")]


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
