"""ContextVar-based stream configuration for Goteo.

A StreamConfig is passed to StreamingParser at construction time. When none
is given, the parser reads the current context default, which applications
can set once (or temporarily, in tests) without threading a config object
through every call site.

Usage:
    # Explicit
    parser = StreamingParser(StreamConfig(max_buffer_size=4096))

    # Context default
    set_stream_config(StreamConfig(id_prefix="chat"))
    try:
        parser = StreamingParser()
    finally:
        reset_stream_config()

    # Or use the context manager
    with stream_config_context(StreamConfig(preserve_whitespace=True)):
        parser = StreamingParser()

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goteo.errors import ConfigError

if TYPE_CHECKING:
    from goteo.detectors.base import BlockMatcher
    from goteo.inline.emphasis import InlineSpan

InlineMatcher = Callable[[str], Iterable["InlineSpan"]]

_MATCHER_FIELDS = ("before_matchers", "after_matchers", "inline_matchers")


@dataclass(frozen=True, slots=True)
class StreamConfig:
    """Immutable stream configuration.

    Frozen dataclass; validated once in __post_init__ so a bad value is
    reported where the config is built, not halfway through a stream.

    Attributes:
        max_buffer_size: Compaction threshold. Consumed input is released once
            the processed offset passes this many characters and no block is
            open. Larger values mean fewer slice copies and more peak memory.
        max_lookahead: Upper bound on characters held for an undecided line
            (a possible table header waiting for its separator, a line that
            might still become a block marker). Past it, the held text is
            treated as plain content.
        id_prefix: Prefix for generated block ids ("md" -> "md-1", "md-2", ...)
        preserve_whitespace: Keep leading/trailing whitespace in
            End.final_content instead of trimming it
        inline_annotations: Emit Annotation events for inline spans and links
            when a text block closes
        before_matchers: Custom block matchers tried before the built-ins
        after_matchers: Custom block matchers tried after the built-ins,
            before the paragraph fallback
        inline_matchers: Callables returning extra InlineSpans for a closed
            text block's content

    """

    max_buffer_size: int = 10_000
    max_lookahead: int = 4096
    id_prefix: str = "md"
    preserve_whitespace: bool = False
    inline_annotations: bool = True
    before_matchers: tuple[BlockMatcher, ...] = ()
    after_matchers: tuple[BlockMatcher, ...] = ()
    inline_matchers: tuple[InlineMatcher, ...] = ()

    def __post_init__(self) -> None:
        for name in ("max_buffer_size", "max_lookahead"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(name, value, "must be an integer")
            if value <= 0:
                raise ConfigError(name, value, "must be positive")

        if not isinstance(self.id_prefix, str) or not self.id_prefix:
            raise ConfigError("id_prefix", self.id_prefix, "must be a non-empty string")

        for name in _MATCHER_FIELDS:
            matchers = tuple(getattr(self, name))
            for matcher in matchers:
                if not callable(matcher):
                    raise ConfigError(name, matcher, "matchers must be callable")
            # Lists are accepted for convenience; stored as tuples
            object.__setattr__(self, name, matchers)

    @classmethod
    def from_dict(cls, config_dict: dict) -> StreamConfig:
        """Create StreamConfig from dictionary.

        Only includes keys that are valid StreamConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                StreamConfig attribute names.

        Returns:
            New StreamConfig instance with values from dict.

        Example:
            >>> config = StreamConfig.from_dict({
            ...     "max_buffer_size": 2048,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.max_buffer_size
            2048

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: StreamConfig = StreamConfig()

_stream_config: ContextVar[StreamConfig] = ContextVar(
    "stream_config",
    default=_DEFAULT_CONFIG,
)


def get_stream_config() -> StreamConfig:
    """Get the current default stream configuration (context-local)."""
    return _stream_config.get()


def set_stream_config(config: StreamConfig) -> None:
    """Set the default stream configuration for the current context.

    Args:
        config: StreamConfig used by parsers created without an explicit one.

    """
    _stream_config.set(config)


def reset_stream_config() -> None:
    """Reset to the module-level default configuration."""
    _stream_config.set(_DEFAULT_CONFIG)


@contextmanager
def stream_config_context(config: StreamConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: StreamConfig to use within the context.

    Yields:
        None

    Example:
        >>> with stream_config_context(StreamConfig(id_prefix="t")):
        ...     parser = StreamingParser()
        >>> # Previous default restored here

    """
    previous = _stream_config.get()
    _stream_config.set(config)
    try:
        yield
    finally:
        _stream_config.set(previous)


__all__ = [
    "InlineMatcher",
    "StreamConfig",
    "get_stream_config",
    "reset_stream_config",
    "set_stream_config",
    "stream_config_context",
]
