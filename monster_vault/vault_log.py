"""Diagnostics log for the vault.

Records that could not be derived are reported here instead of failing the
listing. The file sink stores one JSON event per line; its reader skips
blank, partial or non-object lines so a crash mid-append loses one event at
most.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol


class DiagnosticsSink(Protocol):
    def record(self, event: dict[str, Any]) -> None: ...


def _event_value(obj: Any) -> Any:
    # Events carry ids, messages and the exception that triggered them.
    if isinstance(obj, BaseException):
        return repr(obj)
    if isinstance(obj, dict):
        return {str(k): _event_value(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_event_value(v) for v in obj]
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


def to_event(event: dict[str, Any]) -> dict[str, Any]:
    """JSON-ready copy of ``event`` stamped with ``ts_utc`` if it has none."""
    out = _event_value(event)
    out.setdefault("ts_utc", datetime.now(timezone.utc).isoformat())
    return out


def append_event(path: Path, event: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(to_event(event), ensure_ascii=False)

    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(line + "\n")
        f.flush()
        try:
            os.fsync(f.fileno())
        except OSError:
            # Some filesystems do not support fsync.
            pass


def read_events(path: Path, *, max_events: int | None = None) -> list[dict[str, Any]]:
    """Events in file order; with ``max_events`` only the most recent ones."""
    if not path.exists():
        return []

    events: list[dict[str, Any]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            events.append(obj)

    if max_events is not None:
        return events[-int(max_events):] if max_events > 0 else []
    return events


class DiagnosticsLog:
    """Diagnostics sink bound to a JSONL file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def record(self, event: dict[str, Any]) -> None:
        append_event(self.path, event)

    def events(self, *, max_events: int | None = None) -> list[dict[str, Any]]:
        return read_events(self.path, max_events=max_events)


class MemoryDiagnostics:
    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    def record(self, event: dict[str, Any]) -> None:
        self.events.append(to_event(event))
