"""File naming for rendered backgrounds.

Each render can return several images, and users often render the same place
more than once.  File stems therefore combine a readable, scene-derived base
with the image index and a short random suffix::

    mawaku-lisbon-por-spring-dusk-p1-K3ZQ8

The base is built from slugified scene components, each truncated to
``COMPONENT_MAX_LEN`` characters so names stay short on every filesystem.
"""

from __future__ import annotations

import random
import re
import string
from collections.abc import Iterable

DEFAULT_FILE_NAME_PREFIX = "mawaku"
DEFAULT_RANDOM_SUFFIX_LENGTH = 5
COMPONENT_MAX_LEN = 10

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def slugify(text: str) -> str | None:
    """Lowercase ASCII slug with runs of other characters collapsed to ``-``.

    Returns:
        The slug, or ``None`` when nothing alphanumeric remains.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or None


def truncate_component(slug: str) -> str:
    """Shorten ``slug`` to ``COMPONENT_MAX_LEN`` without a trailing ``-``."""
    if len(slug) <= COMPONENT_MAX_LEN:
        return slug

    truncated = slug[:COMPONENT_MAX_LEN]
    return truncated.rstrip("-") or truncated


def component_token(text: str | None) -> str | None:
    """Slugify and truncate one scene component; ``None`` if it is blank."""
    if text is None:
        return None
    slug = slugify(text)
    return truncate_component(slug) if slug else None


def unique_suffix(length: int = DEFAULT_RANDOM_SUFFIX_LENGTH) -> str:
    """Random suffix of ``length`` distinct characters from ``A-Z0-9``."""
    return "".join(random.sample(_SUFFIX_ALPHABET, length))


class ImageNameContext:
    """Shared naming base for all images of one render.

    Attributes:
        base (str):
            Prefix followed by the non-empty scene component tokens, joined
            with ``-``.
        random_suffix_length (int):
            Length of the random suffix appended by :meth:`file_stem`.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_FILE_NAME_PREFIX,
        components: Iterable[str | None] = (),
        random_suffix_length: int = DEFAULT_RANDOM_SUFFIX_LENGTH,
    ) -> None:
        if not 0 < random_suffix_length <= len(_SUFFIX_ALPHABET):
            raise ValueError(f"random_suffix_length must be 1-{len(_SUFFIX_ALPHABET)}")

        parts = [prefix]
        for component in components:
            token = component_token(component)
            if token:
                parts.append(token)

        self.base = "-".join(parts)
        self.random_suffix_length = random_suffix_length

    def file_stem(self, index: int) -> str:
        """File name without extension for the ``index``-th image (1-based)."""
        return f"{self.base}-p{index}-{unique_suffix(self.random_suffix_length)}"
