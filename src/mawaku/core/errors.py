"""Exception hierarchy for Mawaku.

Every error raised on purpose by Mawaku derives from :class:`MawakuError` so
the command-line entry point can catch a single type, print the message and
set a non-zero exit code.  Library code never prints; it raises.

Error Kinds
-----------
- :class:`PersistenceError` — the configuration file or an output image could
  not be located, read, parsed or written.
- :class:`ProviderError` — the image service could not be used: the
  credential is missing, the request failed, or the payload was unusable.
- :class:`ValidationError` — the caller supplied inconsistent or blank input.
"""


class MawakuError(Exception):
    """Base class for all user-facing Mawaku errors.

    The message is intended to be displayed directly to the user.
    """

    pass


class PersistenceError(MawakuError):
    """Raised when configuration or image files cannot be read or written."""

    pass


class ProviderError(MawakuError):
    """Raised when the external image service cannot fulfil a request."""

    pass


class ValidationError(MawakuError):
    """User-friendly validation error for command-line input."""

    pass
