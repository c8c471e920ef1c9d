# Transport-level events handed to an injected sink, one per gateway call.

import base64
import logging
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from rocketgate_dispatch.core.outcome import Disposition, ErrorClass

EVENTS_LOGGER_NAME = "rocketgate_dispatch.gateway.events"


class TransportEvent(BaseModel):
    """What happened on a single Transport call."""

    host: str = Field()
    kind: str = Field()
    disposition: Disposition = Field()
    elapsed_seconds: float = Field(default=0.0)
    response_code: Optional[int] = Field(default=None)
    reason_code: Optional[int] = Field(default=None)
    error_class: Optional[ErrorClass] = Field(default=None)
    raw_body_b64: Optional[str] = Field(default=None)

    @staticmethod
    def encode_body(body: Optional[str]) -> Optional[str]:
        if body is None:
            return None
        return base64.b64encode(body.encode("utf-8")).decode("ascii")


class EventSink(Protocol):
    def record(self, event: TransportEvent) -> None: ...


class NullEventSink:
    """Discards every event."""

    def record(self, event: TransportEvent) -> None:
        pass


class LoggingEventSink:
    """Logs each transport event as a single DEBUG record with the event fields as `extra`."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger(EVENTS_LOGGER_NAME)

    def record(self, event: TransportEvent) -> None:
        self.logger.debug(
            f"Gateway call to {event.host} ({event.kind}) finished as {event.disposition.value} "
            f"in {event.elapsed_seconds:.3f}s",
            extra={"gateway_event": event.model_dump(mode="json")},
        )
