"""Core functionality for Mawaku.

This package holds everything except the command-line shell:

1. **Settings** (settings.py):
   - Process-level knobs from MAWAKU_* environment variables (Pydantic Settings)

2. **Configuration Store** (config_store.py):
   - The per-user ``~/.mawaku/config.toml`` file: load-or-create, legacy key
     migration, and the set operations

3. **Prompt Composition** (prompt_builder.py):
   - Pure function combining the template with location, season and time of day

4. **Image Generation** (image_client.py, clients/):
   - ``ImageClientBase`` capability interface and the Gemini implementation

5. **Output** (naming.py, image_store.py):
   - Collision-avoiding file names and writing images to disk

Usage Example
-------------
    from mawaku.core import ConfigStore, MawakuSettings, compose

    settings = MawakuSettings()
    config = ConfigStore(settings=settings).load_or_create()
    prompt = compose(config.prompt_template, "Lisbon, Portugal", "spring", "dusk")
"""

from mawaku.core.config_store import ConfigStore, Configuration
from mawaku.core.image_client import GeneratedImage, ImageClientBase
from mawaku.core.prompt_builder import compose
from mawaku.core.settings import MawakuSettings

__all__ = [
    "ConfigStore",
    "Configuration",
    "GeneratedImage",
    "ImageClientBase",
    "MawakuSettings",
    "compose",
]
