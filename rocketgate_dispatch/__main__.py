"""
Operator tool for inspecting gateway host selection.

    python -m rocketgate_dispatch hosts          # current failover candidates
    python -m rocketgate_dispatch route GUID     # targeted host for a reference GUID
"""

import argparse
import logging
import sys

from rocketgate_dispatch.core.logging import setup_logging
from rocketgate_dispatch.exceptions import InvalidReferenceGuidError
from rocketgate_dispatch.gateway import site_router
from rocketgate_dispatch.gateway.client import GatewayClient
from rocketgate_dispatch.settings import Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rocketgate_dispatch", description="Inspect gateway host selection.")
    parser.add_argument("--test-mode", action="store_true", help="Use the test gateway regardless of settings.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("hosts", help="Print the failover candidate hosts.")

    route_parser = subparsers.add_parser("route", help="Print the targeted host for a reference GUID.")
    route_parser.add_argument("guid", help="Reference GUID of a prior transaction.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    client = GatewayClient.from_settings(Settings())
    if args.test_mode:
        client.test_mode = True
    host_pool = client.dispatcher.host_pool

    if args.command == "hosts":
        for host in host_pool.candidates():
            print(host)
        return 0

    try:
        print(site_router.route(args.guid, host_pool.base_host))
    except InvalidReferenceGuidError as e:
        logger.error(f"Cannot route GUID: {e.detail}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
