import logging
from typing import Any, Optional, Tuple

import httpx

from rocketgate_dispatch.core.outcome import ErrorClass, TransportError
from rocketgate_dispatch.core.request import GATEWAY_VERSION
from rocketgate_dispatch.settings import DEFAULT_SERVLET

logger = logging.getLogger(__name__)

USER_AGENT = f"RG Client - Python {GATEWAY_VERSION}"
REQUEST_HEADERS = {
    "Content-Type": "text/xml",
    "User-Agent": USER_AGENT,
}

CONNECT_TIMEOUT = 10
READ_TIMEOUT = 90


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


class Transport:
    """
    Sends one serialized transaction to one gateway host over HTTPS.

    A fresh httpx client is opened for every call; no connection outlives a send.
    Network failures are returned as TransportError values, never raised.

    Attributes:
        protocol (str): URL scheme, "https" in every real deployment.
        port (int): Gateway port.
        servlet (str): Relative service path on the gateway.
        http_transport (Optional[httpx.BaseTransport]): Transport handed to httpx,
            e.g. an httpx.MockTransport in tests.
    """

    def __init__(
        self,
        connect_timeout: int = CONNECT_TIMEOUT,
        read_timeout: int = READ_TIMEOUT,
        protocol: str = "https",
        port: int = 443,
        servlet: str = DEFAULT_SERVLET,
        http_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._connect_timeout = CONNECT_TIMEOUT
        self._read_timeout = READ_TIMEOUT
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.protocol = protocol
        self.port = port
        self.servlet = servlet
        self.http_transport = http_transport

    @property
    def connect_timeout(self) -> int:
        return self._connect_timeout

    @connect_timeout.setter
    def connect_timeout(self, value: Any) -> None:
        timeout = _positive_int(value)
        if timeout is None:
            logger.warning(f"Ignoring invalid connect timeout {value!r}; keeping {self._connect_timeout}")
            return
        self._connect_timeout = timeout

    @property
    def read_timeout(self) -> int:
        return self._read_timeout

    @read_timeout.setter
    def read_timeout(self, value: Any) -> None:
        timeout = _positive_int(value)
        if timeout is None:
            logger.warning(f"Ignoring invalid read timeout {value!r}; keeping {self._read_timeout}")
            return
        self._read_timeout = timeout

    def url_for(self, host: str) -> str:
        # IPv6 literals need brackets to be told apart from the port.
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"
        return f"{self.protocol.lower()}://{host}:{self.port}/{self.servlet.lstrip('/')}"

    def send(self, host: str, payload: str) -> Tuple[Optional[str], Optional[TransportError]]:
        """
        POST a serialized request to a single host.

        Args:
            host: The gateway host to contact.
            payload: The XML request document.

        Returns:
            A (raw_body, error) pair. Exactly one of the two is set.
        """
        url = self.url_for(host)
        timeout = httpx.Timeout(self.read_timeout, connect=self.connect_timeout)
        logger.info(f"Sending gateway request to {url}")

        try:
            with httpx.Client(timeout=timeout, transport=self.http_transport) as client:
                response = client.post(url, content=payload.encode("utf-8"), headers=REQUEST_HEADERS)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout error during gateway request to {host}: {e}")
            return None, TransportError(error_class=ErrorClass.TIMEOUT, message=str(e))
        except httpx.ConnectError as e:
            logger.error(f"Connection error during gateway request to {host}: {e}")
            return None, TransportError(error_class=ErrorClass.CONNECTION_REFUSED, message=str(e))
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            logger.exception(f"Unexpected transport error during gateway request to {host}: {e}")
            return None, TransportError(error_class=ErrorClass.TRANSPORT_FAILURE, message=str(e))

        logger.info(f"Received gateway response with status {response.status_code} from {host}")
        return response.text, None
