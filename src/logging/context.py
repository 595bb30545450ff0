# src/logging/context.py - v2
"""Per-lookup logging context carried in contextvars.

The lookup engine tags each call with a short lookup id and the identifier
being resolved, then updates the current stage as it walks the plan, so
every log line emitted underneath can be traced back to one lookup.
"""

from __future__ import annotations

import contextvars
from dataclasses import asdict, dataclass
from typing import Any

_lookup_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "lookup_id", default=None
)
_identifier: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "identifier", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Snapshot of the current lookup context."""

    lookup_id: str | None = None
    identifier: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Non-None fields only, for JSON log injection."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def get_context() -> LogContext:
    return LogContext(
        lookup_id=_lookup_id.get(),
        identifier=_identifier.get(),
        stage=_stage.get(),
    )


def set_lookup_context(lookup_id: str, identifier: str) -> None:
    """Bind a lookup; resets the stage."""
    _lookup_id.set(lookup_id)
    _identifier.set(identifier)
    _stage.set(None)


def set_stage_context(stage: str | None) -> None:
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _lookup_id.set(None)
    _identifier.set(None)
    _stage.set(None)
