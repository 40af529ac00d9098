import inspect
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

import structlog
from fastapi import Request
from pydantic import BaseModel, Field

logger = structlog.get_logger(__name__)

# Table channels carry INSERT / UPDATE / DELETE, the auth channel carries
# SIGNED_UP / SIGNED_IN / SIGNED_OUT / PASSWORD_RECOVERY / USER_UPDATED.
AUTH_CHANNEL = "auth"


class ChangeEvent(BaseModel):
    channel: str
    event_type: str
    record_id: str | None = None
    record: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


Callback = Callable[[ChangeEvent], Awaitable[None] | None]


class ChangeFeed:
    """In-process push channel signalling row changes and auth state changes."""

    def __init__(self):
        self._subscribers: dict[str, list[Callback]] = defaultdict(list)

    def subscribe(self, channel: str, callback: Callback) -> Callable[[], None]:
        """Register a callback for a channel. Returns the matching unsubscribe handle."""
        self._subscribers[channel].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(channel, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, []))

    async def publish(self, event: ChangeEvent) -> None:
        """Delivers to every subscriber in registration order."""
        for callback in list(self._subscribers.get(event.channel, [])):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                # A failing subscriber MUST NOT block the others
                logger.error(
                    "change_subscriber_failed",
                    channel=event.channel,
                    event_type=event.event_type,
                    error=str(exc),
                )

    async def emit(self, channel: str, event_type: str, record_id: str | None = None, **record: Any) -> None:
        await self.publish(
            ChangeEvent(channel=channel, event_type=event_type, record_id=record_id, record=record)
        )


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed
