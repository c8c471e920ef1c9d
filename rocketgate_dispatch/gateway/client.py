import logging
from typing import Any, Optional

from rocketgate_dispatch.core.events import EventSink, LoggingEventSink
from rocketgate_dispatch.core.outcome import TransactionOutcome
from rocketgate_dispatch.core.request import TransactionKind, TransactionRequest
from rocketgate_dispatch.gateway.confirmation import ConfirmationOrchestrator
from rocketgate_dispatch.gateway.dispatcher import Dispatcher, Shuffle
from rocketgate_dispatch.gateway.host_pool import HostPool
from rocketgate_dispatch.gateway.transport import Transport
from rocketgate_dispatch.settings import Settings

logger = logging.getLogger(__name__)


class GatewayClient:
    """Entry point for payment operations against the gateway.

    Each perform_* method stamps the request with its operation kind, dispatches
    it and, for authorizations and purchases, runs the confirmation round-trip.
    All results come back as TransactionOutcome values.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        host_pool: Optional[HostPool] = None,
        transport: Optional[Transport] = None,
        event_sink: Optional[EventSink] = None,
        shuffle: Optional[Shuffle] = None,
    ) -> None:
        """
        Initializes the client.

        Args:
            settings: Configuration source for any collaborator not passed explicitly.
            host_pool: Failover pool and routing base host.
            transport: Network boundary for every attempt.
            event_sink: Receives one event per gateway call. Defaults to a LoggingEventSink.
            shuffle: In-place reordering of failover candidates. Defaults to random.shuffle.
        """
        self.settings = settings or Settings()
        host_pool = host_pool or self._build_host_pool(self.settings.get_test_mode())
        transport = transport or Transport(
            connect_timeout=self.settings.get_connect_timeout(),
            read_timeout=self.settings.get_read_timeout(),
            port=self.settings.get_port(),
            servlet=self.settings.get_servlet(),
        )
        self.dispatcher = Dispatcher(
            host_pool=host_pool,
            transport=transport,
            event_sink=event_sink or LoggingEventSink(),
            shuffle=shuffle,
        )
        self.confirmation = ConfirmationOrchestrator(self.dispatcher)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayClient":
        return cls(settings=settings)

    def _build_host_pool(self, test_mode: bool) -> HostPool:
        return HostPool(
            test_mode=test_mode,
            test_host=self.settings.get_test_host(),
            live_host=self.settings.get_live_host(),
            aliases=self.settings.get_host_aliases(),
            include_unaliased=self.settings.get_include_unaliased_hosts(),
        )

    # --- Configuration ---
    @property
    def test_mode(self) -> bool:
        return self.dispatcher.host_pool.test_mode

    @test_mode.setter
    def test_mode(self, value: bool) -> None:
        test_mode = bool(value)
        if test_mode == self.test_mode:
            return
        pool = self.dispatcher.host_pool
        self.dispatcher.host_pool = HostPool(
            test_mode=test_mode,
            test_host=pool.test_host,
            live_host=pool.live_host,
            aliases=pool.aliases,
            include_unaliased=pool.include_unaliased,
            resolver=pool.resolver,
        )
        logger.info(f"Gateway client switched to {'test' if test_mode else 'live'} mode")

    @property
    def connect_timeout(self) -> int:
        return self.dispatcher.transport.connect_timeout

    @connect_timeout.setter
    def connect_timeout(self, value: Any) -> None:
        self.dispatcher.transport.connect_timeout = value

    @property
    def read_timeout(self) -> int:
        return self.dispatcher.transport.read_timeout

    @read_timeout.setter
    def read_timeout(self, value: Any) -> None:
        self.dispatcher.transport.read_timeout = value

    # --- Operations ---
    def perform_authorization(self, request: TransactionRequest) -> TransactionOutcome:
        return self._with_confirmation(request.with_kind(TransactionKind.AUTH))

    def perform_purchase(self, request: TransactionRequest) -> TransactionOutcome:
        return self._with_confirmation(request.with_kind(TransactionKind.PURCHASE))

    def perform_ticket(self, request: TransactionRequest) -> TransactionOutcome:
        return self.dispatcher.dispatch(request.with_kind(TransactionKind.TICKET))

    def perform_credit(self, request: TransactionRequest) -> TransactionOutcome:
        return self.dispatcher.dispatch(request.with_kind(TransactionKind.CREDIT))

    def perform_void(self, request: TransactionRequest) -> TransactionOutcome:
        return self.dispatcher.dispatch(request.with_kind(TransactionKind.VOID))

    def _with_confirmation(self, request: TransactionRequest) -> TransactionOutcome:
        outcome = self.dispatcher.dispatch(request)
        return self.confirmation.confirm(request, outcome)
