"""Event serialization: JSON round-trip for parse events.

Converts events to/from JSON-compatible dicts. Useful for:
- Relaying a parse to a browser or another process (SSE, websockets)
- Recording a stream for replay in tests
- Debugging and inspection

All output is deterministic (sorted keys).

Example:
    from goteo import StreamingParser
    from goteo.serialization import to_json, from_json

    parser = StreamingParser()
    events = parser.feed("# Hello\\n") + parser.finalize()
    assert from_json(to_json(events)) == events

Thread Safety:
    All functions are pure; safe to call from any thread.

"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import fields
from typing import Any

from goteo.events import Annotation, Begin, BlockType, Delta, End, ParseEvent

# Registry of event type names to classes for deserialization
_EVENT_TYPES: dict[str, type] = {
    "Begin": Begin,
    "Delta": Delta,
    "End": End,
    "Annotation": Annotation,
}


def to_dict(event: ParseEvent) -> dict[str, Any]:
    """Convert an event to a JSON-compatible dict.

    Includes a ``_type`` discriminator field for deserialization.

    Args:
        event: Any parse event.

    Returns:
        Dict with ``_type`` and all event fields.

    """
    result: dict[str, Any] = {"_type": type(event).__name__}
    for f in fields(event):
        result[f.name] = _serialize_value(getattr(event, f.name))
    return result


def _serialize_value(value: Any) -> Any:
    if isinstance(value, BlockType):
        return value.value
    if isinstance(value, tuple):
        return [_serialize_value(item) for item in value]
    # Primitives, and dicts/lists of primitives
    return value


def from_dict(data: dict[str, Any]) -> ParseEvent:
    """Reconstruct a typed event from a dict produced by to_dict.

    Raises:
        ValueError: If ``_type`` is missing or unknown, or a block type
            name is not recognized.

    """
    type_name = data.get("_type")
    if type_name is None:
        msg = "Missing '_type' field in serialized event"
        raise ValueError(msg)

    event_cls = _EVENT_TYPES.get(type_name)
    if event_cls is None:
        msg = f"Unknown event type: {type_name!r}"
        raise ValueError(msg)

    kwargs: dict[str, Any] = {}
    for f in fields(event_cls):
        if f.name not in data:
            continue
        raw = data[f.name]
        if f.name == "block_type":
            raw = BlockType(raw)
        elif f.name == "range":
            raw = tuple(raw)
        kwargs[f.name] = raw

    return event_cls(**kwargs)


def to_json(events: Iterable[ParseEvent], *, indent: int | None = None) -> str:
    """Serialize a sequence of events to a JSON array.

    Args:
        events: Events in emission order.
        indent: JSON indentation level (None for compact).

    """
    return json.dumps([to_dict(e) for e in events], sort_keys=True, indent=indent)


def from_json(data: str) -> list[ParseEvent]:
    """Deserialize events from a JSON array produced by to_json.

    Raises:
        ValueError: If the JSON is not an array of serialized events.

    """
    raw = json.loads(data)
    if not isinstance(raw, list):
        msg = f"Expected a JSON array of events, got {type(raw).__name__}"
        raise ValueError(msg)
    return [from_dict(item) for item in raw]


__all__ = [
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
]
