"""
Callback Error Taxonomy — everything the callback flow can raise.

All of these are caught at the flow boundary and folded into one of the
three terminal outcomes; none reaches the client as a raw fault.
"""


class PaymentCallbackError(Exception):
    """Base class for payment callback failures."""

    def __init__(self, message: str, txn_ref: str = ""):
        super().__init__(message)
        self.message = message
        self.txn_ref = txn_ref


class VerificationError(PaymentCallbackError):
    """Secure hash missing or mismatched. Never retried."""


class MalformedCallbackError(PaymentCallbackError):
    """Required callback fields are absent."""

    def __init__(self, missing_fields: list[str], txn_ref: str = ""):
        super().__init__(f"Missing required callback fields: {', '.join(missing_fields)}", txn_ref)
        self.missing_fields = missing_fields


class ReconciliationError(PaymentCallbackError):
    """The verified outcome could not be written to the payment store."""


class StoreUnavailableError(PaymentCallbackError):
    """Transient payment store failure; safe to retry."""


class InvalidStateTransition(PaymentCallbackError):
    """A callback flow was asked to leave a terminal state."""
