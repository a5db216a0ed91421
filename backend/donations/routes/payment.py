"""
Payment Routes — JazzCash donation payments.
Handles: initiation, the gateway return callback, and status lookup.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from donations.config import get_settings
from donations.database import get_db
from donations.models.payment import PaymentRecord
from donations.schemas.schemas import (
    CallbackResultResponse, DonationSummary, PaymentInitRequest,
    PaymentInitResponse, PaymentStatusResponse,
)
from donations.services.callback_service import CallbackService
from donations.services.donation_service import CampaignNotFoundError, DonationError, DonationService
from donations.services.payment_store import PaymentStore
from donations.services.presenter import present
from donations.services.reconciliation_service import ReconciliationWriter
from donations.utils.validators import validate_donation_amount, validate_phone

router = APIRouter(prefix="/api/payment", tags=["Payment"])


def get_callback_service(db: Session = Depends(get_db)) -> CallbackService:
    """FastAPI dependency: a callback service bound to this request's session."""
    settings = get_settings()
    writer = ReconciliationWriter(
        PaymentStore(db),
        max_attempts=settings.RECONCILE_MAX_ATTEMPTS,
        wait_seconds=settings.RECONCILE_RETRY_WAIT_SECONDS,
    )
    return CallbackService(settings.gateway_config(), writer)


@router.get("/summary", response_model=DonationSummary)
def donation_summary(amount: int = Query(..., gt=0, description="Donation amount in PKR")):
    """Preview the processing fee and total for a donation."""
    return DonationService.calculate_summary(amount)


@router.post("/initiate", response_model=PaymentInitResponse)
def initiate_payment(payload: PaymentInitRequest, db: Session = Depends(get_db)):
    """Create a pending payment and return the signed JazzCash form."""
    ok, reason = validate_donation_amount(payload.amount)
    if not ok:
        raise HTTPException(status_code=400, detail=reason)
    if not validate_phone(payload.phone_number):
        raise HTTPException(status_code=400, detail="Invalid JazzCash mobile number")

    config = get_settings().gateway_config()
    try:
        payment, summary, fields = DonationService.initiate(
            db,
            config,
            campaign_id=payload.campaign_id,
            amount=payload.amount,
            phone_number=payload.phone_number,
            description=payload.description,
        )
    except CampaignNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except DonationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return PaymentInitResponse(
        success=True,
        txn_ref=payment.txn_ref,
        status=payment.status,
        summary=summary,
        gateway_url=config.post_url,
        gateway_fields=fields,
        message="Redirecting to JazzCash secure payment page...",
    )


@router.get("/callback", response_model=CallbackResultResponse)
def payment_callback(request: Request, service: CallbackService = Depends(get_callback_service)):
    """Gateway return URL. Always answers with one of three result cards."""
    outcome = service.handle(request.query_params)
    return present(outcome)


@router.get("/{txn_ref}", response_model=PaymentStatusResponse)
def get_payment_status(txn_ref: str, db: Session = Depends(get_db)):
    """Current state of a payment by transaction reference."""
    payment = db.query(PaymentRecord).filter(PaymentRecord.txn_ref == txn_ref).first()
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment
