"""Unit tests for writing rendered images to disk."""

from pathlib import Path

import pytest
from conftest import PNG_BYTES, encode_image

from mawaku.core.errors import PersistenceError, ProviderError
from mawaku.core.image_client import GeneratedImage
from mawaku.core.image_store import extension_for, save_images
from mawaku.core.naming import ImageNameContext


class TestExtensionFor:
    """Tests for extension selection."""

    @pytest.mark.parametrize(
        ("mime_type", "expected"),
        [
            ("image/png", "png"),
            ("image/jpeg", "jpg"),
            ("IMAGE/JPG", "jpg"),
            ("image/webp", "webp"),
            ("image/gif", "gif"),
        ],
    )
    def test_known_mime_types(self, mime_type, expected):
        assert extension_for(GeneratedImage(data=b"x", mime_type=mime_type)) == expected

    def test_sniffs_format_without_mime_type(self):
        image = GeneratedImage(data=encode_image("JPEG"), mime_type=None)
        assert extension_for(image) == "jpg"

    def test_sniffs_format_for_unknown_mime_type(self):
        image = GeneratedImage(data=PNG_BYTES, mime_type="application/octet-stream")
        assert extension_for(image) == "png"

    def test_unrecognised_bytes_fall_back_to_bin(self):
        assert extension_for(GeneratedImage(data=b"not an image")) == "bin"


class TestSaveImages:
    """Tests for save_images()."""

    def test_writes_one_file_per_image(self, temp_dir: Path):
        images = [
            GeneratedImage(data=PNG_BYTES, mime_type="image/png"),
            GeneratedImage(data=b"jpeg-bytes", mime_type="image/jpeg"),
        ]
        names = ImageNameContext(components=["Lisbon, Portugal", "spring", "dusk"])

        paths = save_images(images, temp_dir / "out", names)

        assert len(paths) == 2
        assert paths[0].name.startswith("mawaku-lisbon-por-spring-dusk-p1-")
        assert paths[0].suffix == ".png"
        assert paths[1].name.startswith("mawaku-lisbon-por-spring-dusk-p2-")
        assert paths[1].suffix == ".jpg"
        assert paths[0].read_bytes() == PNG_BYTES
        assert paths[1].read_bytes() == b"jpeg-bytes"

    def test_creates_output_directory(self, temp_dir: Path):
        output_dir = temp_dir / "a" / "b" / "c"

        save_images([GeneratedImage(data=PNG_BYTES)], output_dir, ImageNameContext())

        assert output_dir.is_dir()

    def test_repeated_renders_do_not_overwrite(self, temp_dir: Path):
        names = ImageNameContext(components=["Hakone"])
        images = [GeneratedImage(data=PNG_BYTES, mime_type="image/png")]

        first = save_images(images, temp_dir, names)
        second = save_images(images, temp_dir, names)

        assert first[0] != second[0]
        assert len(list(temp_dir.glob("*.png"))) == 2

    def test_no_images_writes_nothing(self, temp_dir: Path):
        assert save_images([], temp_dir / "out", ImageNameContext()) == []

    def test_empty_payload_raises(self, temp_dir: Path):
        with pytest.raises(ProviderError, match="empty"):
            save_images([GeneratedImage(data=b"")], temp_dir, ImageNameContext())

    def test_unwritable_directory_raises(self, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("file in the way")

        with pytest.raises(PersistenceError):
            save_images([GeneratedImage(data=PNG_BYTES)], blocker / "out", ImageNameContext())
