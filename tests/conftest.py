import os
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest
import xmltodict
from rocketgate_dispatch.core.outcome import ErrorClass, TransportError
from rocketgate_dispatch.core.request import TransactionKind, TransactionRequest
from rocketgate_dispatch.gateway.host_pool import HostPool

# A scripted reply is either a raw response body or a transport error class.
Reply = Union[str, ErrorClass]


@pytest.fixture(autouse=True)
def isolate_gateway_env(monkeypatch):
    """AUTOUSE: Removes gateway and logging variables so every test starts from the defaults."""
    for name in list(os.environ):
        if name.startswith("ROCKETGATE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    yield


def gateway_xml(response_code: Optional[int] = 0, reason_code: int = 0, guid: Optional[str] = None, **extra) -> str:
    """Builds a gateway response document."""
    body: Dict[str, str] = {}
    if response_code is not None:
        body["responseCode"] = str(response_code)
    body["reasonCode"] = str(reason_code)
    if guid is not None:
        body["guidNo"] = guid
    body.update({key: str(value) for key, value in extra.items()})
    return xmltodict.unparse({"gatewayResponse": body})


class FakeTransport:
    """Stands in for Transport; replies from a per-host script and records every call."""

    def __init__(self, replies: Optional[Dict[str, List[Reply]]] = None, default: Optional[Reply] = None) -> None:
        self.replies = {host: list(script) for host, script in (replies or {}).items()}
        self.default = default
        self.calls: List[Tuple[str, str]] = []

    @property
    def hosts_called(self) -> List[str]:
        return [host for host, _payload in self.calls]

    def send(self, host: str, payload: str) -> Tuple[Optional[str], Optional[TransportError]]:
        self.calls.append((host, payload))
        script = self.replies.get(host)
        reply = script.pop(0) if script else self.default
        if reply is None:
            raise AssertionError(f"Unexpected gateway call to {host}")
        if isinstance(reply, ErrorClass):
            return None, TransportError(error_class=reply, message=f"scripted {reply.name.lower()}")
        return reply, None


@pytest.fixture
def xml_response() -> Callable[..., str]:
    """Provides the gateway response document builder."""
    return gateway_xml


@pytest.fixture
def fake_transport_factory() -> Callable[..., FakeTransport]:
    """Provides a factory for scripted FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def no_shuffle() -> Callable[[list], None]:
    """A shuffle that keeps the candidate order, for deterministic dispatch."""

    def _keep_order(hosts: list) -> None:
        return None

    return _keep_order


@pytest.fixture
def live_pool() -> HostPool:
    """A live-mode pool resolving to three hosts, two of them aliased."""
    return HostPool(
        test_mode=False,
        test_host="dev-gateway.rocketgate.com",
        live_host="gateway.rocketgate.com",
        aliases={"10.0.0.16": "gateway-16.rocketgate.com", "10.0.0.17": "gateway-17.rocketgate.com"},
        resolver=lambda hostname: ["10.0.0.16", "10.0.0.17", "10.0.0.18"],
    )


@pytest.fixture
def auth_request() -> TransactionRequest:
    """A sample authorization request without a reference GUID."""
    return TransactionRequest(
        kind=TransactionKind.AUTH,
        fields={
            "merchantID": "1",
            "merchantPassword": "testpassword",
            "merchantInvoiceID": "inv-42",
            "amount": "9.99",
            "currency": "USD",
            "cardNo": "4111111111111111",
        },
    )
