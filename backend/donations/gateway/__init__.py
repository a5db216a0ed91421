"""JazzCash gateway protocol: callback parsing, signing, and outcome mapping."""
from donations.gateway.codes import RESPONSE_MESSAGES, SUCCESS_CODE, interpret
from donations.gateway.errors import (
    InvalidStateTransition,
    MalformedCallbackError,
    PaymentCallbackError,
    ReconciliationError,
    StoreUnavailableError,
    VerificationError,
)
from donations.gateway.outcomes import CallbackFlow, CallbackOutcome, CallbackState, Error, Failed, Success
from donations.gateway.request import build_payment_request
from donations.gateway.response import CallbackResponse, parse_callback, require_fields
from donations.gateway.signature import SignatureVerifier

__all__ = [
    "RESPONSE_MESSAGES", "SUCCESS_CODE", "interpret",
    "InvalidStateTransition", "MalformedCallbackError", "PaymentCallbackError",
    "ReconciliationError", "StoreUnavailableError", "VerificationError",
    "CallbackFlow", "CallbackOutcome", "CallbackState", "Error", "Failed", "Success",
    "build_payment_request",
    "CallbackResponse", "parse_callback", "require_fields",
    "SignatureVerifier",
]
