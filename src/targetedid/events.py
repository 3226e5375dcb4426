"""
Observer hooks for the derivation pipeline.

The processor reports what it resolved, skipped and derived through a
DerivationObserver. Observers are a side channel only: nothing they do
changes the derived values, and an observer that raises is logged and
otherwise ignored.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import structlog

from targetedid.models import Field, HashAlgorithm, PathSpec

logger = structlog.get_logger()


class DerivationObserver(Protocol):
    """Receives events from attribute resolution and derivation."""

    def attribute_missing(self, message: str, paths: Sequence[PathSpec]) -> None: ...

    def field_resolved(self, name: str, field: Field, value: str) -> None: ...

    def value_skipped(self, name: str, field: Field, value: str) -> None: ...

    def value_derived(self, name: str, algorithm: HashAlgorithm, value: str) -> None: ...


def notify(observer: DerivationObserver, hook: str, *args: Any) -> None:
    """Call one observer hook, logging instead of raising if it fails."""
    try:
        getattr(observer, hook)(*args)
    except Exception as e:
        logger.warning(
            "observer_failed",
            hook=hook,
            observer=type(observer).__name__,
            error=str(e),
            error_type=type(e).__name__,
        )


class GuardedObserver:
    """Wraps an observer so that none of its failures reach the caller."""

    def __init__(self, observer: DerivationObserver):
        self.observer = observer

    def attribute_missing(self, message: str, paths: Sequence[PathSpec]) -> None:
        notify(self.observer, "attribute_missing", message, paths)

    def field_resolved(self, name: str, field: Field, value: str) -> None:
        notify(self.observer, "field_resolved", name, field, value)

    def value_skipped(self, name: str, field: Field, value: str) -> None:
        notify(self.observer, "value_skipped", name, field, value)

    def value_derived(self, name: str, algorithm: HashAlgorithm, value: str) -> None:
        notify(self.observer, "value_derived", name, algorithm, value)


class LoggingObserver:
    """Observer writing every event to structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self.logger = logger or structlog.get_logger()

    def attribute_missing(self, message: str, paths: Sequence[PathSpec]) -> None:
        self.logger.warning("attribute_missing", message=message, paths=[str(p) for p in paths])

    def field_resolved(self, name: str, field: Field, value: str) -> None:
        self.logger.info("field_resolved", value_name=name, field=field.value, value=value)

    def value_skipped(self, name: str, field: Field, value: str) -> None:
        self.logger.debug("value_skipped", value_name=name, field=field.value, value=value)

    def value_derived(self, name: str, algorithm: HashAlgorithm, value: str) -> None:
        self.logger.debug(
            "value_derived",
            value_name=name,
            algorithm=algorithm.value,
            value=value,
        )


class NullObserver:
    """Observer that discards every event."""

    def attribute_missing(self, message: str, paths: Sequence[PathSpec]) -> None:
        pass

    def field_resolved(self, name: str, field: Field, value: str) -> None:
        pass

    def value_skipped(self, name: str, field: Field, value: str) -> None:
        pass

    def value_derived(self, name: str, algorithm: HashAlgorithm, value: str) -> None:
        pass
