"""Decode the realtime progress lines the runner extension writes on stderr."""

from __future__ import annotations

import json

from .models import ProgressEvent


def parse_progress_line(line: str) -> ProgressEvent | None:
    """Return the event encoded on one line, or None for any other output."""
    line = line.strip()
    if not line.startswith("{"):
        return None

    try:
        payload = json.loads(line)
    except ValueError:
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("event"), str):
        return None

    data = payload.get("data")
    return ProgressEvent(event=payload["event"], data=data if isinstance(data, dict) else {})


class ProgressDecoder:
    """Split a chunked stderr stream into lines and decode the event lines."""

    def __init__(self):
        self._buffer = ""

    def feed(self, chunk: str) -> list[tuple[str, ProgressEvent]]:
        """Consume a chunk; return (raw_line, event) for each complete event line."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._decode(lines)

    def flush(self) -> list[tuple[str, ProgressEvent]]:
        """Decode whatever is left once the stream has ended."""
        rest, self._buffer = self._buffer, ""
        return self._decode([rest])

    @staticmethod
    def _decode(lines: list[str]) -> list[tuple[str, ProgressEvent]]:
        decoded = []
        for line in lines:
            event = parse_progress_line(line)
            if event is not None:
                decoded.append((line.strip(), event))
        return decoded
