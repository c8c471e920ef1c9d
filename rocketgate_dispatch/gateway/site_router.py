"""Targeted routing: derive the site-specific gateway host from a reference GUID.

The leading characters of a GUID encode the site that holds the referenced
transaction. GUIDs longer than 15 characters carry a two-digit hex site number,
shorter ones a single digit. The site number is spliced into the first label
of the base hostname, e.g. ``gateway.rocketgate.com`` becomes
``gateway-10.rocketgate.com`` for site 10.
"""

import string
from typing import Optional

from rocketgate_dispatch.exceptions import InvalidReferenceGuidError

# GUIDs longer than this carry a two-character site prefix.
SHORT_GUID_MAX_LENGTH = 15


def site_number(reference_guid: Optional[str]) -> int:
    """Extract the site number encoded in a reference GUID."""
    if not reference_guid:
        raise InvalidReferenceGuidError("Missing reference GUID", reference_guid=reference_guid)

    prefix_length = 2 if len(reference_guid) > SHORT_GUID_MAX_LENGTH else 1
    prefix = reference_guid[:prefix_length]
    if not all(char in string.hexdigits for char in prefix):
        raise InvalidReferenceGuidError(
            f"Reference GUID '{reference_guid}' has no valid site prefix", reference_guid=reference_guid
        )
    return int("0x" + prefix, 16)


def route(reference_guid: Optional[str], base_host: str) -> str:
    """
    Returns the single host that owns the given reference GUID.

    Args:
        reference_guid: The GUID of a prior transaction.
        base_host: The base DNS name of the gateway for the current mode.

    Returns:
        The site-specific hostname. If the base host has no '.', it is returned unchanged.

    Raises:
        InvalidReferenceGuidError: If the GUID is empty or its site prefix is not hexadecimal.
    """
    site = site_number(reference_guid)
    label, separator, rest = base_host.partition(".")
    if not separator:
        return base_host
    return f"{label}-{site}{separator}{rest}"
