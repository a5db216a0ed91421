"""
Callback Response Parser — turns gateway redirect query parameters into a
typed, immutable record.
"""
from dataclasses import dataclass, fields
from typing import Any, Mapping

from donations.gateway.errors import MalformedCallbackError
from donations.utils.hashing import SECURE_HASH_FIELD

# attribute name -> gateway wire name
WIRE_NAMES = {
    "version": "pp_Version",
    "txn_type": "pp_TxnType",
    "merchant_id": "pp_MerchantID",
    "txn_ref": "pp_TxnRefNo",
    "amount": "pp_Amount",
    "currency": "pp_TxnCurrency",
    "bill_reference": "pp_BillReference",
    "description": "pp_Description",
    "txn_datetime": "pp_TxnDateTime",
    "secure_hash": SECURE_HASH_FIELD,
    "response_code": "pp_ResponseCode",
    "response_message": "pp_ResponseMessage",
    "auth_code": "pp_AuthCode",
    "retrieval_reference": "pp_RetreivalReferenceNo",  # gateway spelling
    "settlement_expiry": "pp_SettlementExpiry",
}


@dataclass(frozen=True)
class CallbackResponse:
    version: str = ""
    txn_type: str = ""
    merchant_id: str = ""
    txn_ref: str = ""
    amount: str = ""
    currency: str = ""
    bill_reference: str = ""
    description: str = ""
    txn_datetime: str = ""
    secure_hash: str = ""
    response_code: str = ""
    response_message: str = ""
    auth_code: str = ""
    retrieval_reference: str = ""
    settlement_expiry: str = ""

    def to_wire(self) -> dict[str, str]:
        """All fields keyed by their gateway names."""
        return {WIRE_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    def signed_fields(self) -> dict[str, str]:
        """The fields covered by the secure hash (everything but the hash)."""
        wire = self.to_wire()
        wire.pop(SECURE_HASH_FIELD)
        return wire


def parse_callback(params: Mapping[str, Any]) -> CallbackResponse:
    """Build a CallbackResponse from query parameters.

    Absent or null fields default to ``""``. Values are otherwise kept
    verbatim since they feed the signature check.
    """
    values = {}
    for attr, wire_name in WIRE_NAMES.items():
        raw = params.get(wire_name)
        values[attr] = "" if raw is None else str(raw)
    return CallbackResponse(**values)


def require_fields(response: CallbackResponse, *attrs: str) -> None:
    """Raise MalformedCallbackError naming every empty required field."""
    missing = [WIRE_NAMES[attr] for attr in attrs if not getattr(response, attr)]
    if missing:
        raise MalformedCallbackError(missing, txn_ref=response.txn_ref)
