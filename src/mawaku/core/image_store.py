"""Persist rendered images to the configured output directory.

Images are written exactly as the provider encoded them; nothing is
re-encoded.  The file extension comes from the reported MIME type, falling
back to sniffing the bytes with Pillow, and finally to ``.bin``.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from mawaku.core.errors import PersistenceError, ProviderError
from mawaku.core.image_client import GeneratedImage
from mawaku.core.naming import ImageNameContext

logger = logging.getLogger(__name__)

_MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}

# Pillow format name -> extension
_FORMAT_EXTENSIONS = {
    "PNG": "png",
    "JPEG": "jpg",
    "WEBP": "webp",
    "GIF": "gif",
}


def extension_for(image: GeneratedImage) -> str:
    """Choose a file extension for ``image``.

    Args:
        image: Image returned by the provider.

    Returns:
        Extension without the leading dot.
    """
    if image.mime_type:
        extension = _MIME_EXTENSIONS.get(image.mime_type.strip().lower())
        if extension:
            return extension

    try:
        with Image.open(io.BytesIO(image.data)) as decoded:
            detected = decoded.format
    except (UnidentifiedImageError, OSError):
        detected = None

    return _FORMAT_EXTENSIONS.get(detected or "", "bin")


def save_images(
    images: Sequence[GeneratedImage],
    output_dir: Path,
    names: ImageNameContext,
) -> list[Path]:
    """Write each image to ``output_dir`` under a collision-avoiding name.

    Args:
        images: Images in provider order.
        output_dir: Destination directory; created if missing.
        names: Naming context shared by all images of this render.

    Returns:
        Paths of the written files, in the same order as ``images``.

    Raises:
        ProviderError: If an image payload is empty.
        PersistenceError: If the directory or a file cannot be written.
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistenceError(f"failed to create output directory {output_dir}: {e}") from e

    saved: list[Path] = []
    for index, image in enumerate(images, start=1):
        if not image.data:
            raise ProviderError(f"image {index} returned by the provider is empty")

        path = output_dir / f"{names.file_stem(index)}.{extension_for(image)}"
        try:
            path.write_bytes(image.data)
        except OSError as e:
            logger.error(f"Failed to write image {path}: {e}")
            raise PersistenceError(f"failed to write image to {path}: {e}") from e

        logger.info(f"Image saved to: {path}")
        saved.append(path)

    return saved
