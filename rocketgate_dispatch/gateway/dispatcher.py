import logging
import random
import time
from typing import Callable, List, MutableSequence, Optional

from rocketgate_dispatch.core.events import EventSink, NullEventSink, TransportEvent
from rocketgate_dispatch.core.outcome import (
    Attempt,
    Disposition,
    ErrorClass,
    GatewayFailure,
    RoutingError,
    Success,
    TransactionOutcome,
    TransportError,
)
from rocketgate_dispatch.core.request import TransactionKind, TransactionRequest
from rocketgate_dispatch.exceptions import InvalidReferenceGuidError
from rocketgate_dispatch.gateway import site_router
from rocketgate_dispatch.gateway.classifier import ResponseClassifier, disposition
from rocketgate_dispatch.gateway.host_pool import HostPool
from rocketgate_dispatch.gateway.transport import Transport

logger = logging.getLogger(__name__)

Shuffle = Callable[[MutableSequence[str]], None]

# Operation kinds that must reach the host holding the referenced transaction.
TARGETED_KINDS = frozenset({TransactionKind.TICKET, TransactionKind.VOID, TransactionKind.CONFIRM})


class Dispatcher:
    """
    Sends transactions to the gateway, either across the failover pool or to a
    single host derived from the request's reference GUID.

    Attempts are strictly sequential. Each Transport call produces exactly one
    Attempt in the returned outcome's attempt log and one event on the sink.

    Attributes:
        host_pool (HostPool): Source of failover candidates and of the base host for routing.
        transport (Transport): Performs the network call for each attempt.
        classifier (ResponseClassifier): Parses raw response bodies.
        event_sink (EventSink): Receives one TransportEvent per Transport call.
        shuffle (Shuffle): Reorders the candidate list in place before each failover dispatch.
    """

    def __init__(
        self,
        host_pool: HostPool,
        transport: Transport,
        classifier: Optional[ResponseClassifier] = None,
        event_sink: Optional[EventSink] = None,
        shuffle: Optional[Shuffle] = None,
    ) -> None:
        self.host_pool = host_pool
        self.transport = transport
        self.classifier = classifier or ResponseClassifier()
        self.event_sink = event_sink or NullEventSink()
        self.shuffle = shuffle or random.shuffle

    def dispatch(self, request: TransactionRequest) -> TransactionOutcome:
        """Dispatch a request using the mode its operation kind calls for."""
        if request.kind in TARGETED_KINDS:
            return self.dispatch_targeted(request)
        if request.kind == TransactionKind.CREDIT and request.reference_guid:
            return self.dispatch_targeted(request)
        return self.dispatch_failover(request)

    def dispatch_failover(self, request: TransactionRequest) -> TransactionOutcome:
        """
        Try the failover pool in random order until one host gives a terminal answer.

        Success and unrecoverable outcomes end the dispatch immediately. Recoverable
        outcomes move on to the next host. If every host fails recoverably, the last
        outcome is returned.

        Args:
            request: The transaction to send.

        Returns:
            The final outcome, carrying the log of every attempt made.
        """
        hosts = list(self.host_pool.candidates())
        self.shuffle(hosts)

        attempts: List[Attempt] = []
        outcome: Optional[TransactionOutcome] = None
        for host in hosts:
            last_failure = attempts[-1] if attempts else None
            outcome, attempt = self._attempt(host, request, last_failure)
            attempts.append(attempt)

            if attempt.disposition is not Disposition.RECOVERABLE:
                return outcome.with_attempts(attempts)

            logger.warning(
                f"Recoverable failure from {host} for {request.kind.value} "
                f"(response={attempt.response_code}, reason={attempt.reason_code}, "
                f"error_class={attempt.error_class}); trying next host"
            )

        if outcome is None:
            return TransportError(
                error_class=ErrorClass.TRANSPORT_FAILURE, message="No gateway hosts available"
            )
        logger.error(f"All {len(hosts)} gateway hosts failed for {request.kind.value}")
        return outcome.with_attempts(attempts)

    def dispatch_targeted(self, request: TransactionRequest) -> TransactionOutcome:
        """
        Send the request once, to the host that owns its reference GUID.

        A missing or unroutable reference GUID yields a RoutingError without any
        network call. Otherwise whatever the single attempt produces is returned.
        """
        try:
            host = site_router.route(request.reference_guid, self.host_pool.base_host)
        except InvalidReferenceGuidError as e:
            logger.error(f"Cannot route {request.kind.value} request: {e.detail}")
            return RoutingError(error_class=ErrorClass.INVALID_REFERENCE_GUID, message=e.detail)

        outcome, attempt = self._attempt(host, request, None)
        return outcome.with_attempts([attempt])

    def _attempt(
        self, host: str, request: TransactionRequest, last_failure: Optional[Attempt]
    ) -> tuple[TransactionOutcome, Attempt]:
        started = time.monotonic()
        raw_body, error = self.transport.send(host, request.to_xml(last_failure))
        outcome = error if error is not None else self.classifier.classify(raw_body)
        elapsed = time.monotonic() - started

        attempt = self._record(host, outcome)
        self._emit(request, attempt, raw_body, elapsed)
        return outcome, attempt

    @staticmethod
    def _record(host: str, outcome: TransactionOutcome) -> Attempt:
        if isinstance(outcome, (Success, GatewayFailure)):
            return Attempt(
                host=host,
                disposition=disposition(outcome),
                response_code=outcome.response_code,
                reason_code=outcome.reason_code,
                guid=outcome.guid,
            )
        return Attempt(
            host=host,
            disposition=disposition(outcome),
            reason_code=int(outcome.error_class),
            error_class=outcome.error_class,
        )

    def _emit(self, request: TransactionRequest, attempt: Attempt, raw_body: Optional[str], elapsed: float) -> None:
        event = TransportEvent(
            host=attempt.host,
            kind=request.kind.value,
            disposition=attempt.disposition,
            elapsed_seconds=elapsed,
            response_code=attempt.response_code,
            reason_code=attempt.reason_code,
            error_class=attempt.error_class,
            raw_body_b64=TransportEvent.encode_body(raw_body),
        )
        try:
            self.event_sink.record(event)
        except Exception as e:
            logger.exception(f"Event sink failed to record gateway event for {attempt.host}: {e}")
