"""
CLI Context Management Module

Holds the options given to the main callback (log level, JSON mode and
the loaded settings) in a ContextVar so that every command reads the same
state.
"""

from __future__ import annotations

import contextvars
from enum import Enum

from pydantic import BaseModel, Field

from storefront.config.models.settings import Settings


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    Global state shared by the CLI commands.

    Attributes:
        log_level: Effective logging level
        json_output: Whether to output in JSON format
        settings: Settings loaded for this invocation
    """

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_output: bool = Field(default=False, description="Whether to output in JSON format")
    settings: Settings = Field(default_factory=Settings, description="Loaded settings")

    def is_json_output_enabled(self) -> bool:
        """Check if JSON output is enabled."""
        return self.json_output


_cli_context: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """Return the current CLI context, creating a default one if unset."""
    context = _cli_context.get()
    if context is None:
        context = CliContext()
        _cli_context.set(context)
    return context


def set_cli_context(context: CliContext) -> None:
    """Set the CLI context for the current invocation."""
    _cli_context.set(context)
