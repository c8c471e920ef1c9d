from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

import xmltodict
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from rocketgate_dispatch.core.outcome import Attempt

GATEWAY_VERSION = "R3.0"

# Fields a confirmation request inherits from the request it confirms.
CONFIRMATION_FIELDS = ("merchantID", "merchantPassword", "merchantCustomerID", "merchantInvoiceID")


class TransactionKind(str, Enum):
    """Payment operations understood by the gateway."""

    AUTH = "auth"
    PURCHASE = "purchase"
    TICKET = "ticket"
    CREDIT = "credit"
    VOID = "void"
    CONFIRM = "confirm"

    @property
    def wire_name(self) -> str:
        """The transactionType value sent to the gateway."""
        return f"CC_{self.name}"


class TransactionRequest(BaseModel):
    """A single payment request to be dispatched to the gateway.

    Requests are immutable. Diagnostic failure details for a dispatch live in
    the attempt log of the returned outcome, not on the request.
    """

    model_config = ConfigDict(frozen=True)

    kind: TransactionKind = Field()
    fields: Dict[str, Any] = Field(default_factory=dict)
    reference_guid: Optional[str] = Field(default=None)

    def with_kind(self, kind: TransactionKind) -> "TransactionRequest":
        """Return a copy of this request stamped with a different operation kind."""
        return self.model_copy(update={"kind": kind})

    def derive_confirmation(self, guid: str) -> "TransactionRequest":
        """Build the confirmation request for a successful transaction with the given GUID."""
        fields = {name: self.fields[name] for name in CONFIRMATION_FIELDS if name in self.fields}
        return TransactionRequest(kind=TransactionKind.CONFIRM, fields=fields, reference_guid=guid)

    def to_xml(self, last_failure: Optional["Attempt"] = None) -> str:
        """
        Serialize the request into the gateway's XML request document.

        Args:
            last_failure: The most recent recoverable attempt of the current dispatch, if any.
                Its host and codes are reported so the gateway can see the earlier failure.

        Returns:
            The XML document as a string.
        """
        body: Dict[str, Any] = {"version": GATEWAY_VERSION}
        body.update({name: _to_text(value) for name, value in self.fields.items() if value is not None})
        body["transactionType"] = self.kind.wire_name
        if self.reference_guid:
            body["referenceGUID"] = self.reference_guid
        if last_failure is not None:
            body["failedServer"] = last_failure.host
            if last_failure.reason_code is not None:
                body["failedReasonCode"] = str(last_failure.reason_code)
            if last_failure.response_code is not None:
                body["failedResponseCode"] = str(last_failure.response_code)
            if last_failure.guid:
                body["failedGUID"] = last_failure.guid
        return xmltodict.unparse({"gatewayRequest": body})


def _to_text(value: Any) -> Any:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (list, tuple)):
        return [_to_text(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_text(item) for key, item in value.items()}
    return str(value)
