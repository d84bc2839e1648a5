from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from issue_sync.models.trace_event import TraceEvent

"""Trace event observers.

- log_trace_event: default observer, writes each step as a DEBUG line
- TraceLogBuffer: collects events in memory and flushes them as JSON Lines to
  ``logs/trace-YYYYMMDD-HHMMSS.log`` (UTC), one file per run
"""

__all__ = [
    "TraceEvent",
    "TraceLogBuffer",
    "log_trace_event",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

logger = logging.getLogger(__name__)


def log_trace_event(event: TraceEvent) -> None:
    details = " ".join(f"{k}={v}" for k, v in event.data.items())
    logger.debug(f"row={event.row} step={event.step} {event.message}" + (f" {details}" if details else ""))


class TraceLogBuffer:
    """In-memory buffer for trace events. Flush writes JSON Lines.

    The buffer is itself a trace observer (callable). The file path is fixed
    on first access; no thread safety is needed (rows run one at a time).
    """
    def __init__(self, logs_dir: Path | None = None, *, echo: bool = True) -> None:
        self._events: list[TraceEvent] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR
        self._echo = echo

    def __call__(self, event: TraceEvent) -> None:
        self.append(event)
        if self._echo:
            log_trace_event(event)

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"trace-{stamp}.log"
        return self._file_path

    @property
    def events(self) -> list[TraceEvent]:
        return list(self._events)

    def append(self, event: TraceEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._events)

    def flush(self) -> Path:
        if not self._events:
            return self.file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for e in self._events:
                f.write(e.to_json_line() + "\n")
        self._events.clear()
        return fp
