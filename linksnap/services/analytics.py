"""Analytics clients injected into the shortening services.

The services never reach for a global tracker: whoever builds a service hands
it an AnalyticsClient. Tracking is best-effort, so callers are expected to
shield user-facing work from any failure raised by `track()`.

Classes:
    AnalyticsClient:
        Interface with a single `track(event, **properties)` method.
    LoggingAnalyticsClient:
        Emits each event as a structured log record.
    NullAnalyticsClient:
        Discards every event.

Example:
    >>> analytics = LoggingAnalyticsClient()
    >>> analytics.track('link_created', alias='ab12cd', original_url='https://example.com')
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, UTC
from typing import Any


# Event names
LINK_CREATED = 'link_created'
LINK_CLICKED = 'link_clicked'


class AnalyticsClient(ABC):
    """Interface for analytics event sinks."""

    @abstractmethod
    def track(self, event: str, **properties: Any) -> None:
        pass


class LoggingAnalyticsClient(AnalyticsClient):
    """Write analytics events as structured log records.

    Each record carries `analyticsEvent`, `trackedAt` and the event properties
    as `extra` fields, so the JSON log formatter ships them as top-level keys.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger('linksnap.analytics')
        self.level = level

    def track(self, event: str, **properties: Any) -> None:
        tracked_at = datetime.now(UTC).isoformat()
        self.logger.log(
            self.level,
            'Analytics event %s.',
            event,
            extra={'analyticsEvent': event, 'trackedAt': tracked_at, **properties},
        )


class NullAnalyticsClient(AnalyticsClient):
    def track(self, event: str, **properties: Any) -> None:
        return None
