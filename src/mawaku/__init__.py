"""Mawaku - generate video-call backgrounds by describing a place."""

__version__ = "0.1.0"

from mawaku.core.config_store import ConfigStore, Configuration
from mawaku.core.errors import MawakuError, PersistenceError, ProviderError, ValidationError
from mawaku.core.prompt_builder import compose
from mawaku.core.settings import MawakuSettings

__all__ = [
    "ConfigStore",
    "Configuration",
    "MawakuError",
    "MawakuSettings",
    "PersistenceError",
    "ProviderError",
    "ValidationError",
    "compose",
]
