"""
Response Code Interpreter — gateway response codes to outcomes.
"""
import structlog

from donations.gateway.errors import MalformedCallbackError
from donations.gateway.outcomes import Failed, Success
from donations.gateway.response import CallbackResponse

logger = structlog.get_logger(__name__)

SUCCESS_CODE = "000"

RESPONSE_MESSAGES = {
    "001": "Transaction failed - Invalid amount",
    "002": "Transaction failed - Invalid merchant",
    "003": "Transaction failed - Invalid transaction reference",
    "004": "Transaction failed - Insufficient funds",
    "005": "Transaction failed - Account blocked",
    "006": "Transaction failed - Invalid phone number",
    "007": "Transaction failed - Network error",
    "008": "Transaction failed - Timeout",
    "009": "Transaction failed - Duplicate transaction",
    "010": "Transaction failed - System error",
    "105": "Transaction declined by the issuer",
}


def describe_failure(code: str) -> str:
    """Human-readable decline reason; unknown codes get a generic message."""
    message = RESPONSE_MESSAGES.get(code)
    if message is None:
        logger.warning("unknown_response_code", response_code=code)
        return f"Payment failed (code {code})"
    return message


def campaign_id_from_bill_reference(bill_reference: str, prefix: str = "CAMP_") -> str:
    if bill_reference.startswith(prefix):
        return bill_reference[len(prefix):]
    return bill_reference


def interpret(response: CallbackResponse, bill_reference_prefix: str = "CAMP_") -> Success | Failed:
    """Classify a verified callback as Success or Failed."""
    code = response.response_code
    if not code:
        raise MalformedCallbackError(["pp_ResponseCode"], txn_ref=response.txn_ref)

    if code == SUCCESS_CODE:
        return Success(
            txn_ref=response.txn_ref,
            amount=response.amount,
            currency=response.currency or "PKR",
            transaction_id=response.retrieval_reference,
            auth_code=response.auth_code,
            txn_datetime=response.txn_datetime,
            campaign_id=campaign_id_from_bill_reference(response.bill_reference, bill_reference_prefix),
            description=response.description,
        )

    return Failed(
        txn_ref=response.txn_ref,
        response_code=code,
        reason=describe_failure(code),
    )
