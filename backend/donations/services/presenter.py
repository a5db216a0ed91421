"""
Result Card Presenter — renders a callback outcome for the donor.
"""
from datetime import datetime

from donations.gateway.outcomes import CallbackOutcome, Error, Failed, Success
from donations.schemas.schemas import CallbackResultResponse


def format_amount(amount: str) -> str:
    """``"500"`` → ``"₨500"``; anything unparseable is shown as received."""
    try:
        return f"₨{round(float(amount)):,}"
    except (ValueError, OverflowError):
        return amount


def format_txn_datetime(value: str) -> str:
    """Gateway timestamps are ``yyyyMMddHHmmss``."""
    try:
        return datetime.strptime(value, "%Y%m%d%H%M%S").strftime("%B %d, %Y %I:%M:%S %p")
    except ValueError:
        return value


def present(outcome: CallbackOutcome) -> CallbackResultResponse:
    if isinstance(outcome, Success):
        return CallbackResultResponse(
            status=outcome.state.value,
            title="Payment Successful!",
            message=(
                "Thank you for your generous donation of "
                f"{format_amount(outcome.amount)}. Your contribution will make a real difference."
            ),
            txn_ref=outcome.txn_ref,
            amount=outcome.amount,
            amount_display=format_amount(outcome.amount),
            transaction_id=outcome.transaction_id,
            auth_code=outcome.auth_code,
            txn_datetime=format_txn_datetime(outcome.txn_datetime),
            support_notice=outcome.reconciliation_error,
        )

    if isinstance(outcome, Failed):
        return CallbackResultResponse(
            status=outcome.state.value,
            title="Payment Failed",
            message=outcome.reason or "Your payment could not be processed. Please try again.",
            txn_ref=outcome.txn_ref,
            response_code=outcome.response_code,
            support_notice=outcome.reconciliation_error,
        )

    if isinstance(outcome, Error):
        return CallbackResultResponse(
            status=outcome.state.value,
            title="Payment Error",
            message=outcome.reason or "An unexpected error occurred while processing your payment.",
            txn_ref=outcome.txn_ref or None,
            support_notice="There was an error processing your payment response. Please contact support.",
        )

    raise TypeError(f"Unhandled callback outcome: {type(outcome).__name__}")
