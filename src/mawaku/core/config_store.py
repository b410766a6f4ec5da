"""User configuration file management for Mawaku.

Mawaku keeps exactly one configuration file per user at
``<home>/.mawaku/config.toml``.  This module locates, loads, defaults,
migrates and persists that file.

Document Layout
---------------
The current schema written by Mawaku::

    prompt = "Create a photorealistic ..."
    image_output_dir = "/home/me/.mawaku/images"

    [gemini_api]
    api_key_env_var = "GEMINI_API_KEY"

``image_output_dir`` stays a flat top-level key so files written by older
releases keep working.  The Gemini credential itself is never written; only
the *name* of the environment variable that holds it is stored.

Compatibility Rules
-------------------
Parsing is tolerant in both directions:

- unknown keys and tables are ignored (files written by newer releases)
- missing keys fall back to built-in defaults (files written by older releases)
- legacy keys are honoured when their current equivalent is absent:

  ========================  ===================================
  Legacy key                Current key
  ========================  ===================================
  ``default_prompt``        ``prompt``
  ``api_key_env_var``       ``[gemini_api].api_key_env_var``
  ``gemini_api_key``        none (literal secret, never used)
  ========================  ===================================

Whenever a legacy key is found the file is rewritten once in the current
schema, dropping any literal ``gemini_api_key`` value.  The stock prompt
shipped by older releases is replaced with :data:`DEFAULT_PROMPT_TEMPLATE`.

A document that is not valid TOML falls back to defaults in memory.  A value
of the wrong type for a known key falls back to that key's default while the
other keys are still honoured.  In both cases the file is left untouched so
the user can repair it, and :attr:`ConfigStore.load_warning` describes the
problem.  The set operations refuse to overwrite a file that is not valid
TOML.  Only an undeterminable home directory or a filesystem error raises
:class:`~mawaku.core.errors.PersistenceError`.

Usage
-----
::

    from mawaku.core.config_store import ConfigStore

    store = ConfigStore()
    config = store.load_or_create()
    store.set_output_dir("~/Pictures/backgrounds")
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from pathlib import Path

import toml
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from mawaku.core.errors import PersistenceError, ValidationError
from mawaku.core.settings import MawakuSettings

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".mawaku"
CONFIG_FILE_NAME = "config.toml"
IMAGES_DIR_NAME = "images"

DEFAULT_PROMPT_TEMPLATE = (
    "Create a photorealistic, high-resolution video-call background of an immersive workspace."
)
DEFAULT_API_KEY_ENV_VAR = "GEMINI_API_KEY"

# Stock prompt written by older releases under ``default_prompt``
LEGACY_DEFAULT_PROMPT = (
    "Imagine a workspace with immersive backgrounds! (Use --help for options.)"
)

_ENV_VAR_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Configuration(BaseModel):
    """Resolved user configuration.

    Instances are immutable; the store produces a new instance for every
    change and persists it.

    Attributes:
        prompt_template: Baseline sentence the prompt composer enriches.
        api_key_env_var: Name of the environment variable holding the Gemini
            API key.
        image_output_dir: Directory where rendered images are written.  A
            leading ``~`` is expanded on use.
    """

    model_config = ConfigDict(frozen=True)

    prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    api_key_env_var: str = DEFAULT_API_KEY_ENV_VAR
    image_output_dir: str

    @property
    def output_path(self) -> Path:
        """Output directory with ``~`` expanded."""
        return Path(self.image_output_dir).expanduser()

    def api_key(self) -> str | None:
        """Read the credential from the configured environment variable.

        Returns:
            The trimmed key, or ``None`` when the variable is unset or blank.
        """
        value = os.environ.get(self.api_key_env_var, "").strip()
        return value or None


# ---------------------------------------------------------------------------
# On-disk document models.
# Every field is optional so older files parse; extra keys are ignored so
# newer files parse.  Types are still checked: a wrong-typed value means the
# document cannot be interpreted.
# ---------------------------------------------------------------------------


class _GeminiApiSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_key_env_var: str | None = None


class _ConfigDocument(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompt: str | None = None
    image_output_dir: str | None = None
    gemini_api: _GeminiApiSection | None = None

    # Legacy top-level keys
    default_prompt: str | None = None
    api_key_env_var: str | None = None
    gemini_api_key: str | None = None

    def legacy_keys(self) -> list[str]:
        """Names of legacy keys present in the document."""
        return [
            name
            for name in ("default_prompt", "api_key_env_var", "gemini_api_key")
            if getattr(self, name) is not None
        ]


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _resolve(document: _ConfigDocument, default_output_dir: Path) -> Configuration:
    """Turn a parsed document into a :class:`Configuration`.

    This is the only place where current keys, legacy keys and defaults are
    reconciled.
    """
    if document.prompt is not None:
        prompt_template = document.prompt
    elif document.default_prompt is not None and document.default_prompt != LEGACY_DEFAULT_PROMPT:
        prompt_template = document.default_prompt
    else:
        prompt_template = DEFAULT_PROMPT_TEMPLATE

    nested_env_var = document.gemini_api.api_key_env_var if document.gemini_api else None
    api_key_env_var = (
        _non_blank(nested_env_var)
        or _non_blank(document.api_key_env_var)
        or DEFAULT_API_KEY_ENV_VAR
    )

    image_output_dir = _non_blank(document.image_output_dir) or str(default_output_dir)

    return Configuration(
        prompt_template=prompt_template,
        api_key_env_var=api_key_env_var,
        image_output_dir=image_output_dir,
    )


def _serialise(config: Configuration) -> str:
    document = {
        "prompt": config.prompt_template,
        "image_output_dir": config.image_output_dir,
        "gemini_api": {"api_key_env_var": config.api_key_env_var},
    }
    return toml.dumps(document)


def resolve_home(settings: MawakuSettings | None = None) -> Path:
    """Determine the home directory that holds ``.mawaku/``.

    Args:
        settings: Optional runtime settings; ``settings.home`` wins when set.

    Returns:
        Home directory path.

    Raises:
        PersistenceError: If the home directory cannot be determined.
    """
    if settings is not None and settings.home is not None:
        return settings.home.expanduser()

    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise PersistenceError("could not determine the home directory") from e


def config_file_path(home: Path) -> Path:
    """Fixed location of the configuration file under ``home``."""
    return home / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class ConfigStore:
    """Load-or-create access to the single user configuration file.

    Attributes:
        path (Path):
            Location of ``config.toml``.
        created (bool):
            ``True`` when the last :meth:`load_or_create` call wrote a new
            file populated with defaults.
        migrated (bool):
            ``True`` when the last :meth:`load_or_create` call rewrote a file
            that contained legacy keys.
        dropped_secret (bool):
            ``True`` when that migration removed a non-empty literal
            ``gemini_api_key``.
        load_warning (str | None):
            Why the last :meth:`load_or_create` call fell back to defaults
            for some or all keys, or ``None`` when the file was read cleanly.
    """

    def __init__(self, path: Path | None = None, settings: MawakuSettings | None = None) -> None:
        """Initialise the store.

        Args:
            path: Explicit configuration file location.  When omitted the
                fixed per-user location under the home directory is used.
            settings: Runtime settings used to resolve the home directory.

        Raises:
            PersistenceError: If ``path`` is omitted and the home directory
                cannot be determined.
        """
        self.path = path if path is not None else config_file_path(resolve_home(settings))
        self.created = False
        self.migrated = False
        self.dropped_secret = False
        self.load_warning: str | None = None
        self._unparseable = False

    @property
    def default_output_dir(self) -> Path:
        """Default image directory, next to the configuration file."""
        return self.path.parent / IMAGES_DIR_NAME

    def defaults(self) -> Configuration:
        """Built-in configuration used when no file exists."""
        return Configuration(image_output_dir=str(self.default_output_dir))

    def load_or_create(self) -> Configuration:
        """Return the stored configuration, creating the file if absent.

        A file that cannot be interpreted is never rewritten; the affected
        keys fall back to defaults and :attr:`load_warning` is set.

        Returns:
            The resolved configuration.

        Raises:
            PersistenceError: If the file cannot be read or written.
        """
        self.created = False
        self.migrated = False
        self.dropped_secret = False
        self.load_warning = None
        self._unparseable = False

        if not self.path.exists():
            config = self.defaults()
            self.save(config)
            self.created = True
            logger.info(f"Created configuration at {self.path}")
            return config

        document = self._read_document()
        if document is None:
            return self.defaults()

        config = _resolve(document, self.default_output_dir)

        legacy = document.legacy_keys()
        if legacy and self.load_warning is None:
            logger.info(f"Migrating legacy configuration keys {legacy} in {self.path}")
            if _non_blank(document.gemini_api_key):
                logger.warning(
                    f"Removed literal gemini_api_key from {self.path}; "
                    f"Mawaku reads the key from ${config.api_key_env_var} instead"
                )
                self.dropped_secret = True
            self.save(config)
            self.migrated = True

        return config

    def save(self, config: Configuration) -> None:
        """Persist ``config`` in the current schema.

        Args:
            config: Configuration to write.

        Raises:
            PersistenceError: If the directory or file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(_serialise(config), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to write configuration {self.path}: {e}")
            raise PersistenceError(f"failed to write configuration file {self.path}: {e}") from e

        logger.debug(f"Saved configuration to {self.path}")

    def set_api_key_env_var(self, name: str) -> None:
        """Persist the name of the environment variable holding the API key.

        Args:
            name: Environment variable name, e.g. ``"GEMINI_API_KEY"``.

        Raises:
            ValidationError: If ``name`` is blank or not a valid variable name.
            PersistenceError: If the configuration cannot be loaded or written,
                or the existing file is not valid TOML.
        """
        cleaned = name.strip()
        if not cleaned:
            raise ValidationError("API key environment variable name must not be empty")
        if not _ENV_VAR_NAME.match(cleaned):
            raise ValidationError(f"'{cleaned}' is not a valid environment variable name")

        config = self._load_for_update()
        self.save(config.model_copy(update={"api_key_env_var": cleaned}))

    def set_output_dir(self, path: str) -> None:
        """Persist the directory rendered images are written to.

        Args:
            path: Output directory.  Stored as given; ``~`` is expanded on use.

        Raises:
            ValidationError: If ``path`` is blank.
            PersistenceError: If the configuration cannot be loaded or written,
                or the existing file is not valid TOML.
        """
        cleaned = path.strip()
        if not cleaned:
            raise ValidationError("image output directory must not be empty")

        config = self._load_for_update()
        self.save(config.model_copy(update={"image_output_dir": cleaned}))

    def _load_for_update(self) -> Configuration:
        config = self.load_or_create()
        if self._unparseable:
            raise PersistenceError(
                f"refusing to overwrite {self.path}: {self.load_warning}; "
                "fix or remove the file first"
            )
        return config

    def _read_document(self) -> _ConfigDocument | None:
        """Parse the file, dropping keys whose values have the wrong type.

        Returns:
            The parsed document, or ``None`` when the file is not valid TOML.

        Raises:
            PersistenceError: If the file cannot be read.
        """
        try:
            with open(self.path, "rb") as handle:
                raw = tomllib.load(handle)
        except OSError as e:
            raise PersistenceError(f"failed to read configuration file {self.path}: {e}") from e
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            self._unparseable = True
            self.load_warning = f"{self.path} is not valid TOML: {e}"
            logger.warning(f"Ignoring configuration file: {self.load_warning}")
            return None

        try:
            return _ConfigDocument.model_validate(raw)
        except PydanticValidationError as e:
            invalid = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})

        self.load_warning = f"{self.path} has invalid values for: {', '.join(invalid)}"
        logger.warning(f"Using defaults for invalid keys: {self.load_warning}")
        # Every invalid key was removed, so the remainder validates.
        return _ConfigDocument.model_validate(
            {key: value for key, value in raw.items() if key not in invalid}
        )
