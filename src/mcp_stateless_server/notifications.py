"""Timed notification streams.

A stream sends a fixed number of log messages through an injected ``send``
callable, pausing between them. A failed send is logged and the stream moves
on to the next tick; it is never retried.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import anyio
from mcp.types import LoggingLevel

from mcp_stateless_server.utilities.logging import get_logger

logger = get_logger(__name__)

UNBOUNDED_NOTIFICATION_COUNT = 100
"""Number of notifications sent when a stream is started with ``count=0``."""

DEFAULT_INTERVAL_MS = 100
DEFAULT_COUNT = 10


@dataclass(frozen=True)
class NotificationMessage:
    sequence_number: int
    level: LoggingLevel
    text: str
    emitted_at: datetime


SendNotification = Callable[[NotificationMessage], Awaitable[None]]


@dataclass
class NotificationJob:
    """Progress of a single notification stream."""

    interval_ms: int
    target_count: int
    emitted_count: int = 0
    failed_count: int = 0
    cancelled: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def effective_count(self) -> int:
        return self.target_count or UNBOUNDED_NOTIFICATION_COUNT

    @property
    def done(self) -> bool:
        return self.emitted_count >= self.effective_count


def completion_text(interval_ms: int) -> str:
    return f"Started sending periodic notifications every {interval_ms}ms"


async def stream_notifications(
    send: SendNotification,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    count: int = DEFAULT_COUNT,
    *,
    cancel_event: anyio.Event | None = None,
    level: LoggingLevel = "info",
) -> NotificationJob:
    """Send ``count`` numbered notifications, ``interval_ms`` apart.

    Args:
        send: delivers one message; exceptions it raises are logged and skipped
        interval_ms: pause between two consecutive notifications, 0 for none
        count: number of notifications, 0 meaning UNBOUNDED_NOTIFICATION_COUNT
        cancel_event: checked before every tick, stops the stream once set
        level: log level attached to every message

    Returns:
        The finished job. ``job.cancelled`` is set when ``cancel_event`` stopped
        the stream early.

    Raises:
        ValueError: if ``interval_ms`` or ``count`` is negative
    """
    if interval_ms < 0:
        raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")

    job = NotificationJob(interval_ms=interval_ms, target_count=count)
    bound = job.effective_count
    logger.debug("Starting notification stream: %d notifications every %dms", bound, interval_ms)

    while not job.done:
        if cancel_event is not None and cancel_event.is_set():
            job.cancelled = True
            logger.info("Notification stream cancelled after %d of %d notifications", job.emitted_count, bound)
            break

        job.emitted_count += 1
        now = datetime.now(timezone.utc)
        message = NotificationMessage(
            sequence_number=job.emitted_count,
            level=level,
            text=f"Periodic notification #{job.emitted_count} at {now.isoformat()}",
            emitted_at=now,
        )
        try:
            await send(message)
        except Exception:
            job.failed_count += 1
            logger.warning("Error sending notification #%d", message.sequence_number, exc_info=True)

        if not job.done and interval_ms:
            await anyio.sleep(interval_ms / 1000)

    return job
