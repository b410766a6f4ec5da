"""Runtime settings for Mawaku.

This module provides process-level settings using Pydantic Settings.  These
are knobs for the tool itself (where to look for the home directory, which
image model to call, how long to wait) and are distinct from the user's
``~/.mawaku/config.toml``, which is managed by
:mod:`mawaku.core.config_store`.

Environment Variable Loading
-----------------------------
Values are loaded in the following priority order:
1. Environment variables (MAWAKU_* prefix)
2. .env file in the current working directory
3. Default values defined in MawakuSettings

Example .env file:
    MAWAKU_GEMINI_MODEL=imagen-4.0-generate-001
    MAWAKU_SAMPLE_COUNT=2
    MAWAKU_REQUEST_TIMEOUT=120
    MAWAKU_LOG_LEVEL=INFO

Usage Example
-------------
    from mawaku.core.settings import MawakuSettings

    settings = MawakuSettings()
    print(settings.gemini_model)

Settings are constructed once by the command-line entry point and passed
explicitly to the components that need them.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_GEMINI_MODEL = "imagen-4.0-generate-001"
DEFAULT_SAMPLE_COUNT = 2


class MawakuSettings(BaseSettings):
    """Process-level settings for Mawaku.

    Attributes
    ----------
    home : Path | None
        Overrides the home directory used to locate ``.mawaku/config.toml``.
        ``None`` means ``Path.home()``.
    gemini_model : str
        Imagen model identifier passed to the Gemini API.
    sample_count : int
        Number of images requested per render (1-4).
    request_timeout : float
        HTTP timeout for the image request, in seconds.
    log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
        Default logging level when ``--verbose`` is not given.

    Examples
    --------
        >>> settings = MawakuSettings(sample_count=1, _env_file=None)
        >>> settings.sample_count
        1
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MAWAKU_",
        case_sensitive=False,
        extra="ignore",
    )

    home: Path | None = Field(
        default=None,
        description="Home directory override for locating .mawaku/config.toml",
    )
    gemini_model: str = Field(
        default=DEFAULT_GEMINI_MODEL,
        description="Imagen model used for background generation",
    )
    sample_count: int = Field(
        default=DEFAULT_SAMPLE_COUNT,
        description="Number of images requested per render",
        ge=1,
        le=4,
    )
    request_timeout: float = Field(
        default=120.0,
        description="HTTP timeout for the image request in seconds",
        gt=0,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level used when --verbose is not given",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        # Accept "info" as well as "INFO" from the environment.
        if isinstance(value, str):
            return value.strip().upper()
        return value
