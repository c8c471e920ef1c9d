import logging
import socket
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Iterable[str]]


def resolve_addresses(hostname: str) -> List[str]:
    """Resolve a hostname to its distinct numeric addresses using getaddrinfo."""
    infos = socket.getaddrinfo(hostname, 443, proto=socket.IPPROTO_TCP)
    addresses: List[str] = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        address = sockaddr[0]
        if address not in addresses:
            addresses.append(address)
    return addresses


class HostPool:
    """
    Candidate gateway hosts for failover dispatch.

    In test mode the pool is the single test host. In live mode the canonical
    live hostname is resolved and each resolved address is mapped back to its
    symbolic alias through the configured alias table.

    Attributes:
        test_mode (bool): Whether the pool targets the test gateway.
        test_host (str): The test gateway hostname.
        live_host (str): The canonical live gateway hostname.
        aliases (Dict[str, str]): Resolved address to host alias table.
        include_unaliased (bool): Keep resolved addresses that have no alias, using the
            address itself as the host. When False they are dropped.
    """

    def __init__(
        self,
        test_mode: bool,
        test_host: str,
        live_host: str,
        aliases: Optional[Dict[str, str]] = None,
        include_unaliased: bool = True,
        resolver: Resolver = resolve_addresses,
    ) -> None:
        self.test_mode = test_mode
        self.test_host = test_host
        self.live_host = live_host
        self.aliases = dict(aliases or {})
        self.include_unaliased = include_unaliased
        self.resolver = resolver

    @property
    def base_host(self) -> str:
        """The base DNS name used for targeted routing in the current mode."""
        return self.test_host if self.test_mode else self.live_host

    def candidates(self) -> List[str]:
        """
        Returns the hosts eligible for a failover dispatch.

        The order carries no meaning; callers shuffle it. The list is never empty:
        if resolution fails or yields nothing usable, the canonical live host is used.
        """
        if self.test_mode:
            return [self.test_host]

        try:
            addresses = list(self.resolver(self.live_host))
        except (OSError, UnicodeError) as e:
            logger.warning(f"DNS resolution of {self.live_host} failed: {e}; using the canonical host")
            return [self.live_host]

        hosts: List[str] = []
        for address in addresses:
            host = self.aliases.get(address)
            if host is None:
                if not self.include_unaliased:
                    logger.warning(f"Dropping resolved address {address} for {self.live_host}: no alias configured")
                    continue
                logger.warning(f"Resolved address {address} for {self.live_host} has no alias; using it directly")
                host = address
            if host not in hosts:
                hosts.append(host)

        if not hosts:
            logger.warning(f"No usable hosts resolved for {self.live_host}; using the canonical host")
            return [self.live_host]
        return hosts
