"""Exception classes for Goteo.

Input-shape problems never raise: the parser degrades malformed or truncated
Markdown to the nearest well-defined block. Only two situations surface as
exceptions:

- ConfigError: invalid tuning parameters, rejected at construction time.
- DetectorError: a detector broke the forward-progress invariant. This is a
  bug in a detector (built-in or custom), not bad input.
"""

from __future__ import annotations


class GoteoError(Exception):
    """Base exception for all Goteo errors.

    Subclass this for specific error categories.
    """

    pass


class ConfigError(GoteoError, ValueError):
    """Invalid stream configuration.

    Raised by StreamConfig when a field has an unusable value.
    """

    def __init__(self, field: str, value: object, message: str) -> None:
        """Initialize config error.

        Args:
            field: Name of the offending config field
            value: The rejected value
            message: Description of the constraint that was violated
        """
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: {message}")


class DetectorError(GoteoError):
    """A block detector failed to make progress.

    Raised when a detector reports a zero-length match or a scan step does
    not advance the processed offset.
    """

    def __init__(
        self,
        message: str,
        detector: str | None = None,
        offset: int | None = None,
    ) -> None:
        """Initialize detector error with optional location.

        Args:
            message: Error description
            detector: Name of the detector that misbehaved (optional)
            offset: Absolute stream offset where scanning stalled (optional)
        """
        self.message = message
        self.detector = detector
        self.offset = offset

        location = ""
        if detector:
            location = f"{detector}:"
        if offset is not None:
            location += f"{offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")
