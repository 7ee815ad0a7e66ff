"""Pydantic settings models for functional test configuration.

The recognized keys are few; anything else a suite author puts in the
configuration is kept on the model (``extra="allow"``) so application-level
test helpers can read it, but the lifecycle ignores it.
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["structured", "simple"] = "simple"
    file: Optional[str] = None
    max_size: str = "10MB"
    backup_count: int = 3


class PlaywrightConfig(BaseModel):
    """Launch settings for the Playwright browser process.

    These apply once per factory. Per-test browser options live under the
    top-level ``browser`` key and are passed to each new context verbatim.
    """

    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    launch_args: list[str] = Field(default_factory=list)


class FunctionalTestConfig(BaseSettings):
    """Main configuration model for a functional test suite."""

    model_config = SettingsConfigDict(
        env_prefix="MINOR_TEST_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
        extra="allow",
    )

    browser: Dict[str, Any] = Field(
        default_factory=dict,
        description="Options forwarded verbatim to every new browser instance"
    )
    base_path: Path = Field(
        default_factory=Path.cwd,
        description="Project root; captured HTML goes to <base_path>/test/"
    )
    local_host: str = Field(
        default="localhost",
        description="Host that stays reachable while HTTP interception is active"
    )
    playwright: PlaywrightConfig = Field(default_factory=PlaywrightConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('browser', mode='before')
    @classmethod
    def default_browser_options(cls, v):
        """Treat an explicit null the same as a missing sub-configuration."""
        return {} if v is None else v
