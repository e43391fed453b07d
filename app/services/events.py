"""Lifecycle event fan-out.

Services hand committed events to an EventEmitter, which forwards each one
to every configured sink. Delivery is the sinks' concern; a failing sink is
logged and does not affect the others or the committed state change.
"""

import logging
from typing import Any, Protocol

import httpx

from app.core.config import settings
from app.domain.events import LifecycleEvent

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def publish(self, event_kind: str, payload: dict[str, Any]) -> None:
        ...


class LoggingEventSink:
    """Writes every event to the application log."""

    def publish(self, event_kind: str, payload: dict[str, Any]) -> None:
        logger.info("event %s %s", event_kind, payload)


class WebhookEventSink:
    """POSTs every event as JSON to an external endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def publish(self, event_kind: str, payload: dict[str, Any]) -> None:
        with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
            response = client.post(
                self.url,
                json={"kind": event_kind, "payload": payload},
            )
        response.raise_for_status()


class EventEmitter:
    def __init__(self, sinks: list[EventSink]) -> None:
        self.sinks = list(sinks)

    def emit(self, event: LifecycleEvent) -> None:
        payload = event.payload()
        for sink in self.sinks:
            try:
                sink.publish(event.kind, payload)
            except Exception:
                logger.exception("Failed to deliver %s event to %s", event.kind, type(sink).__name__)


def build_event_emitter() -> EventEmitter:
    """Build the emitter for the configured sinks."""
    sinks: list[EventSink] = [LoggingEventSink()]
    if settings.event_webhook_url:
        sinks.append(WebhookEventSink(settings.event_webhook_url))
    return EventEmitter(sinks)
