"""Mawaku command-line entry point.

Describe a place and Mawaku composes a prompt from it, sends the prompt to
the Gemini image API and saves the returned backgrounds.

Examples::

    mawaku --location "Lisbon, Portugal" --season spring --time-of-day dusk
    mawaku --location "Hakone, Japan" --dry-run
    mawaku --set-output-dir ~/Pictures/backgrounds
    mawaku --set-gemini-api-key <KEY>

Output Streams
--------------
The prompt is written to stdout so it can be piped.  Informational lines,
warnings and errors go to stderr.  Any :class:`~mawaku.core.errors.MawakuError`
ends the run with exit code 1.

This function is registered as the ``mawaku`` console script in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import os
import sys

import click
from pydantic import ValidationError as PydanticValidationError

from mawaku import __version__
from mawaku.core.clients.gemini import GeminiImageClient
from mawaku.core.config_store import DEFAULT_PROMPT_TEMPLATE, ConfigStore
from mawaku.core.errors import MawakuError, ProviderError, ValidationError
from mawaku.core.image_client import ImageClientBase
from mawaku.core.image_store import save_images
from mawaku.core.naming import ImageNameContext
from mawaku.core.prompt_builder import compose, trimmed_or_none
from mawaku.core.settings import MawakuSettings

logger = logging.getLogger(__name__)


def _info(message: str) -> None:
    click.echo(message, err=True)


def _warn(message: str) -> None:
    click.secho(message, fg="yellow", err=True)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--location", metavar="TEXT", help="Place the background should depict.")
@click.option("--season", metavar="TEXT", help="Season of the scene, e.g. 'spring'.")
@click.option("--time-of-day", metavar="TEXT", help="Time of day of the scene, e.g. 'dusk'.")
@click.option("--prompt", metavar="TEXT", help="Replace the stored prompt template for this run.")
@click.option(
    "--set-gemini-api-key",
    metavar="KEY",
    help="Use KEY for this run and record its environment variable name in the config.",
)
@click.option(
    "--set-api-key-env-var",
    metavar="NAME",
    help="Persist the environment variable Mawaku reads the Gemini key from.",
)
@click.option("--set-output-dir", metavar="PATH", help="Persist the directory images are saved to.")
@click.option("--dry-run", is_flag=True, help="Print the prompt without calling the image API.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="mawaku")
def main(
    location: str | None,
    season: str | None,
    time_of_day: str | None,
    prompt: str | None,
    set_gemini_api_key: str | None,
    set_api_key_env_var: str | None,
    set_output_dir: str | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Generate video-call backgrounds by describing a place."""
    try:
        settings = MawakuSettings()
    except PydanticValidationError as e:
        click.secho(f"Error: invalid MAWAKU_* settings: {e}", fg="red", err=True)
        sys.exit(1)

    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        run(
            settings,
            location=location,
            season=season,
            time_of_day=time_of_day,
            prompt=prompt,
            set_gemini_api_key=set_gemini_api_key,
            set_api_key_env_var=set_api_key_env_var,
            set_output_dir=set_output_dir,
            dry_run=dry_run,
        )
    except MawakuError as e:
        logger.debug("Run failed", exc_info=True)
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


def run(
    settings: MawakuSettings,
    *,
    location: str | None = None,
    season: str | None = None,
    time_of_day: str | None = None,
    prompt: str | None = None,
    set_gemini_api_key: str | None = None,
    set_api_key_env_var: str | None = None,
    set_output_dir: str | None = None,
    dry_run: bool = False,
    client: ImageClientBase | None = None,
) -> None:
    """Execute one Mawaku invocation.

    Steps:
    1. Validate scene arguments
    2. Load (or create) the configuration file
    3. Apply any requested configuration updates
    4. Warn when the Gemini credential is unavailable
    5. Print the prompt, composed from the scene when a location is given
    6. Render and save images unless this is a dry run

    Args:
        settings: Runtime settings.
        client: Image client used for rendering.  Defaults to a
            :class:`GeminiImageClient` built from ``settings``.

    Raises:
        MawakuError: Any persistence, provider or validation failure.
    """
    if location is not None and trimmed_or_none(location) is None:
        raise ValidationError("--location must not be empty")
    if location is None and (trimmed_or_none(season) or trimmed_or_none(time_of_day)):
        raise ValidationError("--season and --time-of-day require --location")

    store = ConfigStore(settings=settings)
    config = store.load_or_create()

    if store.load_warning:
        _warn(
            f"Warning: failed to load Mawaku configuration ({store.load_warning}). "
            "Falling back to defaults."
        )
    if store.created:
        _info(
            f"Created Mawaku configuration at {store.path} "
            f'with the default prompt: "{DEFAULT_PROMPT_TEMPLATE}"'
        )
    if store.migrated:
        _info(f"Migrated {store.path} to the current configuration format")
    if store.dropped_secret:
        _warn(
            f"Warning: removed a literal gemini_api_key from {store.path}. "
            f"Export it as {config.api_key_env_var} instead."
        )

    if set_api_key_env_var is not None:
        store.set_api_key_env_var(set_api_key_env_var)
        config = store.load_or_create()
        _info(f"Updated API key environment variable to {config.api_key_env_var} in {store.path}")

    if set_output_dir is not None:
        store.set_output_dir(set_output_dir)
        config = store.load_or_create()
        _info(f"Updated image output directory to {config.image_output_dir} in {store.path}")

    if set_gemini_api_key is not None:
        key = set_gemini_api_key.strip()
        if not key:
            raise ValidationError("--set-gemini-api-key must not be empty")

        env_var = config.api_key_env_var
        # Only the variable name is persisted; the key lives in the environment.
        store.set_api_key_env_var(env_var)
        os.environ[env_var] = key
        _info(
            f"Recorded {env_var} in {store.path}; the key itself is never written to disk. "
            f"Run `export {env_var}=<KEY>` to keep it for future sessions."
        )

    api_key = config.api_key()
    if api_key is None:
        _warn(
            f"Warning: {config.api_key_env_var} is not set. "
            "Use `mawaku --set-gemini-api-key <KEY>` to configure it."
        )

    base_prompt = prompt if prompt is not None else config.prompt_template

    if location is None:
        click.echo(base_prompt)
        return

    composed = compose(base_prompt, location, season, time_of_day)
    click.echo(composed)

    if dry_run:
        return

    if api_key is None:
        raise ProviderError(f"cannot render images: {config.api_key_env_var} is not set")

    if client is None:
        client = GeminiImageClient(settings)
    logger.info(f"Rendering with {client.get_client_info()}")
    images = client.generate(composed, api_key)
    if not images:
        _warn("Warning: the image service returned no images.")
        return

    names = ImageNameContext(components=[location, season, time_of_day])
    for path in save_images(images, config.output_path, names):
        _info(f"Saved image to {path}")


if __name__ == "__main__":
    main()
