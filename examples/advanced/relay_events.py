"""Relay parse events to another process as JSON, and restore them there."""

from goteo import parse_stream
from goteo.serialization import from_json, to_json

events = list(parse_stream(["# Relayed\n\n", "Events survive a ", "*JSON* round-trip."]))

payload = to_json(events)
restored = from_json(payload)

print("Original == restored:", events == restored)
print("JSON length:", len(payload), "chars")
