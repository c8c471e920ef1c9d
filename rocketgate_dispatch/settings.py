import os
from typing import Dict

from dotenv import load_dotenv

from rocketgate_dispatch.exceptions import GatewayConfigurationError

# Load .env file variables into environment
load_dotenv(verbose=True)

DEFAULT_TEST_HOST = "dev-gateway.rocketgate.com"
DEFAULT_LIVE_HOST = "gateway.rocketgate.com"
DEFAULT_HOST_ALIASES = "69.20.127.91=gateway-16.rocketgate.com,72.32.126.131=gateway-17.rocketgate.com"
DEFAULT_SERVLET = "/gateway/servlet/ServiceDispatcherAccess"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Gateway client configuration settings loaded from environment variables."""

    # --- Mode & Hosts ---
    def get_test_mode(self) -> bool:
        """Returns True if the client should talk to the test gateway."""
        return _parse_bool(os.getenv("ROCKETGATE_TEST_MODE", "false"))

    def get_test_host(self) -> str:
        return os.getenv("ROCKETGATE_TEST_HOST", DEFAULT_TEST_HOST)

    def get_live_host(self) -> str:
        return os.getenv("ROCKETGATE_LIVE_HOST", DEFAULT_LIVE_HOST)

    def get_host_aliases(self) -> Dict[str, str]:
        """Returns the resolved-address to host-alias table.

        The value is a comma-separated list of ``address=alias`` pairs. An empty
        value yields an empty table (every resolved address is then unaliased).
        """
        raw = os.getenv("ROCKETGATE_HOST_ALIASES", DEFAULT_HOST_ALIASES)
        aliases: Dict[str, str] = {}
        for entry in raw.split(","):
            entry = entry.strip()
            if not entry:
                continue
            address, sep, alias = entry.partition("=")
            if not sep or not address.strip() or not alias.strip():
                raise GatewayConfigurationError(
                    f"Invalid ROCKETGATE_HOST_ALIASES entry '{entry}', expected 'address=alias'"
                )
            aliases[address.strip()] = alias.strip()
        return aliases

    def get_include_unaliased_hosts(self) -> bool:
        """Returns True if resolved addresses without an alias stay in the pool."""
        return _parse_bool(os.getenv("ROCKETGATE_INCLUDE_UNALIASED_HOSTS", "true"))

    # --- Transport ---
    def get_connect_timeout(self) -> int:
        try:
            return int(os.getenv("ROCKETGATE_CONNECT_TIMEOUT", "10"))
        except ValueError:
            raise ValueError("ROCKETGATE_CONNECT_TIMEOUT environment variable must be an integer.")

    def get_read_timeout(self) -> int:
        try:
            return int(os.getenv("ROCKETGATE_READ_TIMEOUT", "90"))
        except ValueError:
            raise ValueError("ROCKETGATE_READ_TIMEOUT environment variable must be an integer.")

    def get_port(self) -> int:
        try:
            return int(os.getenv("ROCKETGATE_PORT", "443"))
        except ValueError:
            raise ValueError("ROCKETGATE_PORT environment variable must be an integer.")

    def get_servlet(self) -> str:
        return os.getenv("ROCKETGATE_SERVLET", DEFAULT_SERVLET)

    # --- Logging Settings ---
    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()

    def get_event_log_level(self, default: str = "WARNING") -> str:
        """Gets the level for the raw gateway event logger. Events carry response bodies."""
        return os.getenv("ROCKETGATE_EVENT_LOG_LEVEL", default).upper()
