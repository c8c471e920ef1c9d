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
from rocketgate_dispatch.gateway.client import GatewayClient

__all__ = [
    "Attempt",
    "Disposition",
    "ErrorClass",
    "GatewayClient",
    "GatewayFailure",
    "RoutingError",
    "Success",
    "TransactionKind",
    "TransactionOutcome",
    "TransactionRequest",
    "TransportError",
]
