"""Tests for the HTTPS transport boundary, using httpx.MockTransport."""

import logging

import httpx
import pytest
from rocketgate_dispatch.core.outcome import ErrorClass
from rocketgate_dispatch.core.request import GATEWAY_VERSION
from rocketgate_dispatch.gateway.transport import USER_AGENT, Transport


def make_transport(handler, **kwargs) -> Transport:
    return Transport(http_transport=httpx.MockTransport(handler), **kwargs)


def test_send_posts_payload_to_servlet(xml_response):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, text=xml_response(0, guid="G1"))

    transport = make_transport(handler)
    body, error = transport.send("gateway-16.rocketgate.com", "<gatewayRequest/>")

    assert error is None
    assert "<guidNo>G1</guidNo>" in body
    request = seen["request"]
    assert request.method == "POST"
    assert request.url.scheme == "https"
    assert request.url.host == "gateway-16.rocketgate.com"
    assert request.url.path == "/gateway/servlet/ServiceDispatcherAccess"
    assert request.headers["Content-Type"] == "text/xml"
    assert request.headers["User-Agent"] == USER_AGENT
    assert request.content == b"<gatewayRequest/>"


def test_send_returns_body_for_non_200_status():
    transport = make_transport(lambda request: httpx.Response(503, text="Service Unavailable"))

    body, error = transport.send("gateway-16.rocketgate.com", "<gatewayRequest/>")

    assert error is None
    assert body == "Service Unavailable"


@pytest.mark.parametrize(
    "exception, expected_class",
    [
        (httpx.ConnectError("Connection refused"), ErrorClass.CONNECTION_REFUSED),
        (httpx.ConnectTimeout("connect timed out"), ErrorClass.TIMEOUT),
        (httpx.ReadTimeout("read timed out"), ErrorClass.TIMEOUT),
        (httpx.ReadError("connection reset"), ErrorClass.TRANSPORT_FAILURE),
        (httpx.RemoteProtocolError("bad response"), ErrorClass.TRANSPORT_FAILURE),
        (OSError("network is down"), ErrorClass.TRANSPORT_FAILURE),
        (httpx.InvalidURL("Invalid port"), ErrorClass.TRANSPORT_FAILURE),
    ],
)
def test_send_maps_transport_failures(exception, expected_class, caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exception

    transport = make_transport(handler)
    with caplog.at_level(logging.ERROR):
        body, error = transport.send("gateway-16.rocketgate.com", "<gatewayRequest/>")

    assert body is None
    assert error is not None
    assert error.error_class == expected_class
    assert str(exception) in error.message
    assert "gateway-16.rocketgate.com" in caplog.text


def test_url_for_custom_settings():
    transport = Transport(protocol="HTTPS", port=8443, servlet="alt/servlet")

    assert transport.url_for("gw.example.com") == "https://gw.example.com:8443/alt/servlet"


def test_default_timeouts():
    transport = Transport()

    assert transport.connect_timeout == 10
    assert transport.read_timeout == 90


@pytest.mark.parametrize("value, expected", [(5, 5), ("15", 15), (30.9, 30)])
def test_timeouts_accept_positive_numbers(value, expected):
    transport = Transport()

    transport.connect_timeout = value
    transport.read_timeout = value

    assert transport.connect_timeout == expected
    assert transport.read_timeout == expected


@pytest.mark.parametrize("value", [0, -5, "abc", None, "", "0"])
def test_timeouts_ignore_invalid_values(value, caplog):
    transport = Transport(connect_timeout=7, read_timeout=70)

    with caplog.at_level(logging.WARNING):
        transport.connect_timeout = value
        transport.read_timeout = value

    assert transport.connect_timeout == 7
    assert transport.read_timeout == 70
    assert "Ignoring invalid connect timeout" in caplog.text
    assert "Ignoring invalid read timeout" in caplog.text


def test_invalid_constructor_timeouts_fall_back_to_defaults():
    transport = Transport(connect_timeout=-1, read_timeout="never")

    assert transport.connect_timeout == 10
    assert transport.read_timeout == 90


def test_timeouts_are_passed_to_httpx(monkeypatch, xml_response):
    captured = {}
    real_client = httpx.Client

    def spy_client(*args, **kwargs):
        captured["timeout"] = kwargs["timeout"]
        return real_client(*args, **kwargs)

    monkeypatch.setattr("rocketgate_dispatch.gateway.transport.httpx.Client", spy_client)
    transport = make_transport(lambda request: httpx.Response(200, text=xml_response(0)), connect_timeout=4, read_timeout=40)

    transport.send("gateway-16.rocketgate.com", "<gatewayRequest/>")

    assert captured["timeout"].connect == 4
    assert captured["timeout"].read == 40


def test_url_for_brackets_ipv6_literals():
    transport = Transport()

    assert transport.url_for("2001:db8::1") == "https://[2001:db8::1]:443/gateway/servlet/ServiceDispatcherAccess"
    assert transport.url_for("[2001:db8::1]") == "https://[2001:db8::1]:443/gateway/servlet/ServiceDispatcherAccess"


def test_send_to_ipv6_host(xml_response):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["host"] = request.url.host
        return httpx.Response(200, text=xml_response(0))

    body, error = make_transport(handler).send("2001:db8::1", "<gatewayRequest/>")

    assert error is None
    assert body is not None
    assert seen["host"] == "2001:db8::1"



def test_user_agent_carries_request_version():
    assert USER_AGENT == f"RG Client - Python {GATEWAY_VERSION}"
