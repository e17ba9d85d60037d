# app/core/exceptions.py
from typing import Any


class ReconciliationError(Exception):
    """Base exception for failures of the attendance reconciliation engine."""


class InvalidTimestampError(ReconciliationError, ValueError):
    """
    Raised when a punch event's timestamp is missing or cannot be parsed.

    Duration arithmetic depends on a total ordering of punches, so a single
    bad timestamp fails the whole computation; no partial result is returned.
    """

    def __init__(self, value: Any, event_id: str | None = None) -> None:
        self.value = value
        self.event_id = event_id
        target = f"event '{event_id}'" if event_id is not None else "punch event"
        super().__init__(f"Invalid timestamp {value!r} on {target}")


class ConfigurationError(ReconciliationError):
    """Raised when a setting (e.g. the local timezone) cannot be used."""
