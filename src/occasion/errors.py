"""Exception hierarchy for configuration loading.

Every failure while locating, reading, or decoding a configuration document
is a :class:`ConfigError`. The ``code`` attribute is stable and is what the
service layer reports in :class:`~occasion.services.result.ServiceError`.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for all configuration failures."""

    code = "CONFIG_ERROR"


class ConfigIOError(ConfigError):
    """A configuration file could not be read or written."""

    code = "IO_ERROR"


class ConfigNotFoundError(ConfigIOError):
    """The configuration file does not exist.

    The root document recovers from this by writing a default document.
    """

    code = "NOT_FOUND"


class DeserializeError(ConfigError):
    """Malformed JSON, or JSON that does not match the document schema."""

    code = "DESERIALIZE_ERROR"


class UndeterminableLocationError(ConfigError):
    """No override path was given and no platform config directory exists."""

    code = "UNDETERMINABLE_LOCATION"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "cannot determine config dir, pass $OCCASION_CONFIG directly"
        )


class MaxRecursionDepthError(ConfigError):
    """Imports nested deeper than the allowed depth."""

    code = "MAX_RECURSION_DEPTH"


class NotAFileError(ConfigError):
    """A resolved configuration path exists but is not a regular file."""

    code = "NOT_A_FILE"
