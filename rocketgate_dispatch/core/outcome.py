"""Transaction outcomes returned by every dispatch.

An outcome is exactly one of four shapes:

- ``Success``: the gateway accepted the transaction.
- ``GatewayFailure``: the gateway answered with a non-success response code.
- ``TransportError``: no usable gateway payload was received (network failure or
  malformed body).
- ``RoutingError``: the dispatch was abandoned before any network call.

Each outcome carries the attempt log of the dispatch that produced it.
"""

from enum import Enum, IntEnum
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorClass(IntEnum):
    """Fixed error classes for failures that never carry gateway codes."""

    CONNECTION_REFUSED = 301
    TIMEOUT = 303
    TRANSPORT_FAILURE = 304
    MISSING_CONFIRMATION_GUID = 307
    MALFORMED_RESPONSE = 399
    INVALID_REFERENCE_GUID = 410


class Disposition(str, Enum):
    """How the dispatcher should treat an outcome."""

    SUCCESS = "success"
    RECOVERABLE = "recoverable"
    UNRECOVERABLE = "unrecoverable"


class Attempt(BaseModel):
    """One Transport call made during a dispatch."""

    model_config = ConfigDict(frozen=True)

    host: str = Field()
    disposition: Disposition = Field()
    response_code: Optional[int] = Field(default=None)
    reason_code: Optional[int] = Field(default=None)
    guid: Optional[str] = Field(default=None)
    error_class: Optional[ErrorClass] = Field(default=None)


class _OutcomeBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    attempts: Tuple[Attempt, ...] = Field(default=())

    def with_attempts(self, attempts) -> "_OutcomeBase":
        """Return a copy of this outcome carrying the given attempt log."""
        return self.model_copy(update={"attempts": tuple(attempts)})

    @property
    def last_failure(self) -> Optional[Attempt]:
        """The most recent recoverable attempt, if any."""
        for attempt in reversed(self.attempts):
            if attempt.disposition is Disposition.RECOVERABLE:
                return attempt
        return None

    @property
    def failed_server(self) -> Optional[str]:
        failure = self.last_failure
        return failure.host if failure else None

    @property
    def failed_reason_code(self) -> Optional[int]:
        failure = self.last_failure
        return failure.reason_code if failure else None

    @property
    def failed_response_code(self) -> Optional[int]:
        failure = self.last_failure
        return failure.response_code if failure else None

    @property
    def failed_guid(self) -> Optional[str]:
        failure = self.last_failure
        return failure.guid if failure else None


class Success(_OutcomeBase):
    """The gateway accepted the transaction."""

    type: Literal["success"] = Field(default="success")
    guid: Optional[str] = Field(default=None)
    response_code: int = Field(default=0)
    reason_code: int = Field(default=0)
    fields: Dict[str, Any] = Field(default_factory=dict)


class GatewayFailure(_OutcomeBase):
    """The gateway processed the request and answered with a failure code."""

    type: Literal["gateway_failure"] = Field(default="gateway_failure")
    guid: Optional[str] = Field(default=None)
    response_code: int = Field()
    reason_code: int = Field(default=0)
    fields: Dict[str, Any] = Field(default_factory=dict)


class TransportError(_OutcomeBase):
    """No usable gateway payload was received for an attempt."""

    type: Literal["transport_error"] = Field(default="transport_error")
    error_class: ErrorClass = Field()
    message: str = Field(default="")


class RoutingError(_OutcomeBase):
    """The dispatch could not be addressed to a host; nothing was sent."""

    type: Literal["routing_error"] = Field(default="routing_error")
    error_class: ErrorClass = Field()
    message: str = Field(default="")


TransactionOutcome = Annotated[
    Union[Success, GatewayFailure, TransportError, RoutingError],
    Field(discriminator="type"),
]
