from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

"""TraceEvent model for the row reconciliation narrative.

One event is emitted per reconciliation step (extract, identity, fetch,
decide, update, notify) and handed to an injected observer. The observer
decides where the narrative goes (debug log, JSON Lines buffer, test list).
"""

__all__ = [
    "TraceEvent",
    "TraceObserver",
    "STEP_EXTRACT",
    "STEP_IDENTITY",
    "STEP_FETCH",
    "STEP_DECIDE",
    "STEP_UPDATE",
    "STEP_NOTIFY",
]

STEP_EXTRACT = "extract"
STEP_IDENTITY = "identity"
STEP_FETCH = "fetch"
STEP_DECIDE = "decide"
STEP_UPDATE = "update"
STEP_NOTIFY = "notify"


@dataclass(frozen=True)
class TraceEvent:
    """Structured record of one reconciliation step.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        row: 1-based sheet row number
        step: one of the STEP_* constants
        message: short human readable description
        data: step specific values (urls, state, recipient, ...)
    """
    timestamp: str
    row: int
    step: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(row: int, step: str, message: str, **data: Any) -> TraceEvent:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return TraceEvent(timestamp=ts, row=row, step=step, message=message, data=data)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, default=str)


TraceObserver = Callable[[TraceEvent], None]
