"""Shared pytest fixtures for Mawaku tests."""

import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from mawaku.core.config_store import ConfigStore
from mawaku.core.image_client import GeneratedImage, ImageClientBase
from mawaku.core.settings import MawakuSettings


def encode_image(fmt: str = "PNG") -> bytes:
    """Encode a tiny RGB image in the given Pillow format."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 120, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


PNG_BYTES = encode_image("PNG")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def isolated_env(monkeypatch, temp_dir: Path) -> Path:
    """Isolate the process environment from the developer's machine.

    - HOME / USERPROFILE / MAWAKU_HOME point at a fresh temporary home
    - GEMINI_API_KEY and MAWAKU_* tuning variables are removed
    - the working directory has no ``.env`` file

    Variables are set before being deleted so that monkeypatch restores (or
    removes) anything the code under test writes to ``os.environ``.

    Returns:
        The temporary home directory.
    """
    home = temp_dir / "home"
    home.mkdir()
    workdir = temp_dir / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("MAWAKU_HOME", str(home))

    for name in (
        "GEMINI_API_KEY",
        "MAWAKU_GEMINI_MODEL",
        "MAWAKU_SAMPLE_COUNT",
        "MAWAKU_REQUEST_TIMEOUT",
        "MAWAKU_LOG_LEVEL",
    ):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)

    monkeypatch.chdir(workdir)
    return home


@pytest.fixture
def test_settings(isolated_env: Path) -> MawakuSettings:
    """Runtime settings rooted at the temporary home.

    Returns:
        MawakuSettings instance for testing
    """
    return MawakuSettings(home=isolated_env, _env_file=None)


@pytest.fixture
def config_path(isolated_env: Path) -> Path:
    """Location of config.toml under the temporary home."""
    return isolated_env / ".mawaku" / "config.toml"


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    """ConfigStore bound to the temporary home."""
    return ConfigStore(path=config_path)


class StubImageClient(ImageClientBase):
    """Image client that records calls and returns canned images."""

    name = "Stub"
    description = "Returns canned images without network access"
    model = "stub-model"

    def __init__(self, images: list[GeneratedImage] | None = None) -> None:
        self.images = images if images is not None else []
        self.calls: list[tuple[str, str]] = []

    def generate(self, prompt: str, api_key: str) -> list[GeneratedImage]:
        self.calls.append((prompt, api_key))
        return list(self.images)


@pytest.fixture
def stub_client() -> StubImageClient:
    """Stub client returning two PNG images."""
    return StubImageClient(
        [
            GeneratedImage(data=PNG_BYTES, mime_type="image/png"),
            GeneratedImage(data=PNG_BYTES, mime_type="image/png"),
        ]
    )
