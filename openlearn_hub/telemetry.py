"""Structured telemetry for curriculum cache lookups and API failures."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, List, Literal, Optional

logger = logging.getLogger("openlearn.telemetry")

CacheOutcome = Literal["hit", "miss", "expired"]


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    payload: Dict[str, Any]


_listeners: List[Callable[[TelemetryEvent], None]] = []
_lock = RLock()


def register_listener(listener: Callable[[TelemetryEvent], None]) -> None:
    """Register an in-process listener (used in tests)."""
    with _lock:
        _listeners.append(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def emit_event(name: str, **fields: Any) -> None:
    """Fan an event out to listeners and log it as a single JSON line."""
    payload = {key: _plain(value) for key, value in fields.items() if value is not None}
    event = TelemetryEvent(name=name, payload=payload)

    with _lock:
        listeners = list(_listeners)

    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", name)

    logger.debug("TELEMETRY %s", json.dumps({"event": name, **payload}, default=str))


def record_cache_lookup(outcome: CacheOutcome, key: Any) -> None:
    emit_event(f"curriculum_cache_{outcome}", key=key)


def record_request_failure(operation: str, reason: str, status_code: Optional[int] = None) -> None:
    emit_event("curriculum_request_failed", operation=operation, reason=reason, status_code=status_code)


def _plain(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


__all__ = [
    "CacheOutcome",
    "TelemetryEvent",
    "clear_listeners",
    "emit_event",
    "record_cache_lookup",
    "record_request_failure",
    "register_listener",
]
