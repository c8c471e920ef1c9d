"""Turn raw gateway response bodies into outcomes, and outcomes into dispositions.

The gateway's response codes:

    0  success
    1  bank decline            unrecoverable
    2  risk / scrubbing fail   unrecoverable
    3  system error            recoverable, another host may succeed
    4  request error           unrecoverable

Reason codes in the server-side transport range are recoverable even when
paired with an otherwise unrecoverable response code.
"""

import logging
from typing import Any, Dict, Optional
from xml.parsers.expat import ExpatError

import xmltodict

from rocketgate_dispatch.core.outcome import (
    Disposition,
    ErrorClass,
    GatewayFailure,
    RoutingError,
    Success,
    TransactionOutcome,
    TransportError,
)

logger = logging.getLogger(__name__)

RESPONSE_SUCCESS = 0

RESPONSE_CODE_DISPOSITIONS: Dict[int, Disposition] = {
    RESPONSE_SUCCESS: Disposition.SUCCESS,
    1: Disposition.UNRECOVERABLE,
    2: Disposition.UNRECOVERABLE,
    3: Disposition.RECOVERABLE,
    4: Disposition.UNRECOVERABLE,
}

# 300-311 are the gateway's own connection/service failures; 307 is a bugcheck.
RECOVERABLE_REASON_CODES = frozenset(code for code in range(300, 312) if code != 307) | {399}


def classify_codes(response_code: int, reason_code: Optional[int] = None) -> Disposition:
    """Classify a gateway response/reason code pair.

    Unknown response codes are unrecoverable.
    """
    if response_code == RESPONSE_SUCCESS:
        return Disposition.SUCCESS
    if reason_code is not None and reason_code in RECOVERABLE_REASON_CODES:
        return Disposition.RECOVERABLE
    return RESPONSE_CODE_DISPOSITIONS.get(response_code, Disposition.UNRECOVERABLE)


def disposition(outcome: TransactionOutcome) -> Disposition:
    """Classify any outcome for the dispatcher's retry decision."""
    if isinstance(outcome, Success):
        return Disposition.SUCCESS
    if isinstance(outcome, GatewayFailure):
        return classify_codes(outcome.response_code, outcome.reason_code)
    if isinstance(outcome, TransportError):
        return Disposition.RECOVERABLE
    if isinstance(outcome, RoutingError):
        return Disposition.UNRECOVERABLE
    raise TypeError(f"Unsupported outcome type: {type(outcome).__name__}")


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class ResponseClassifier:
    """Parses gateway response bodies into TransactionOutcome values."""

    root_element = "gatewayResponse"

    def parse(self, raw_body: Optional[str]) -> Optional[Dict[str, Any]]:
        """Return the gateway response fields, or None when the body is not a gateway payload."""
        if not raw_body or not raw_body.strip():
            return None
        try:
            document = xmltodict.parse(raw_body)
        except ExpatError as e:
            logger.warning(f"Unable to parse gateway response body: {e}")
            return None
        data = document.get(self.root_element) if isinstance(document, dict) else None
        if not isinstance(data, dict):
            return None
        return dict(data)

    def classify(self, raw_body: Optional[str]) -> TransactionOutcome:
        data = self.parse(raw_body)
        response_code = _to_int(data.get("responseCode")) if data is not None else None
        if response_code is None:
            return TransportError(error_class=ErrorClass.MALFORMED_RESPONSE, message=raw_body or "")

        reason_code = _to_int(data.get("reasonCode"))
        if reason_code is None:
            reason_code = 0
        guid = data.get("guidNo")
        if not isinstance(guid, str) or not guid.strip():
            guid = None

        if response_code == RESPONSE_SUCCESS:
            return Success(guid=guid, response_code=response_code, reason_code=reason_code, fields=data)
        return GatewayFailure(guid=guid, response_code=response_code, reason_code=reason_code, fields=data)
