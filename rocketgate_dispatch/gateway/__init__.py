"""Host selection, transport, classification and dispatch against the payment gateway."""

from .classifier import ResponseClassifier, classify_codes, disposition
from .client import GatewayClient
from .confirmation import ConfirmationOrchestrator
from .dispatcher import Dispatcher
from .host_pool import HostPool
from .site_router import route
from .transport import Transport

__all__ = [
    "ConfirmationOrchestrator",
    "Dispatcher",
    "GatewayClient",
    "HostPool",
    "ResponseClassifier",
    "Transport",
    "classify_codes",
    "disposition",
    "route",
]
