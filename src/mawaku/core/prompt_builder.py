"""Scene prompt composition for Mawaku.

The final prompt sent to the image service is built from the stored prompt
template plus the place the user described: a location and, optionally, a
season and a time of day.

Prompt Structure
----------------
::

    [Template sentence.] The scene is set in [location][, during season][, at time of day].

Examples::

    >>> compose("A cosy home office.", "Lisbon, Portugal", "spring", "dusk")
    'A cosy home office. The scene is set in Lisbon, Portugal, during spring, at dusk.'
    >>> compose("A cosy home office", "Hakone")
    'A cosy home office. The scene is set in Hakone.'

Absent or blank season and time-of-day values are left out entirely; no
dangling commas or empty labels are produced.  The location is required by
the caller and is inserted verbatim after trimming surrounding whitespace.
"""

from __future__ import annotations

_SENTENCE_ENDINGS = (".", "!", "?")
_CLOSING_MARKS = ")]\"'"


def trimmed_or_none(value: str | None) -> str | None:
    """Return ``value`` stripped of whitespace, or ``None`` when blank."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _as_sentence(text: str) -> str:
    stripped = text.strip()
    # "... (Use --help.)" already ends a sentence
    if stripped and not stripped.rstrip(_CLOSING_MARKS).endswith(_SENTENCE_ENDINGS):
        stripped += "."
    return stripped


def compose(
    template: str,
    location: str,
    season: str | None = None,
    time_of_day: str | None = None,
) -> str:
    """Compose the final prompt from a template and scene details.

    Args:
        template: Baseline sentence, usually the stored prompt template.  An
            empty template yields only the scene sentence.
        location: Place the background depicts.  Validated by the caller.
        season: Optional season, e.g. ``"spring"``.
        time_of_day: Optional time of day, e.g. ``"dusk"``.

    Returns:
        The composed prompt as a single line of text.
    """
    scene = f"The scene is set in {location.strip()}"

    season_text = trimmed_or_none(season)
    if season_text:
        scene += f", during {season_text}"

    time_text = trimmed_or_none(time_of_day)
    if time_text:
        scene += f", at {time_text}"

    parts = [_as_sentence(template), _as_sentence(scene)]
    return " ".join(part for part in parts if part)
