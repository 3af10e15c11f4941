"""Logging configuration model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages the log level, optional JSON log file and whether
    console output goes through Rich.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    file: str | None = Field(default=None, description="Optional JSON log file path")
    use_rich_console: bool = Field(default=True, description="Use Rich console output")


__all__ = ["LoggingSettings"]
