"""
Donation Service — fee calculation and payment initiation.
"""
import time
import uuid
from typing import Tuple

import structlog
from sqlalchemy.orm import Session

from donations.config import GatewayConfig
from donations.gateway.request import build_payment_request
from donations.models.campaign import Campaign
from donations.models.payment import PaymentRecord, PENDING
from donations.schemas.schemas import DonationSummary
from donations.utils.hashing import FIELD_DELIMITER
from donations.utils.validators import normalize_phone

logger = structlog.get_logger(__name__)

FEE_PERCENT = 2
MIN_FEE = 50


class DonationError(ValueError):
    """A donation request that can't be initiated."""


class CampaignNotFoundError(DonationError):
    pass


class DonationService:
    """Creates pending payment records and the signed gateway request for them."""

    @staticmethod
    def calculate_summary(amount: int) -> DonationSummary:
        """2% processing fee, never less than ₨50, rounded up to the rupee."""
        fee = max((amount * FEE_PERCENT + 99) // 100, MIN_FEE)
        return DonationSummary(amount=amount, fee=fee, total=amount + fee)

    @staticmethod
    def generate_txn_ref() -> str:
        """Format: TXN_<epoch millis>_<9 hex chars>."""
        return f"TXN_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

    @staticmethod
    def initiate(
        db: Session,
        config: GatewayConfig,
        campaign_id: int,
        amount: int,
        phone_number: str,
        description: str,
    ) -> Tuple[PaymentRecord, DonationSummary, dict]:
        """Persist a pending payment and build its signed gateway form.

        Raises:
            CampaignNotFoundError: no such campaign.
            DonationError: the campaign is closed, or the description
                contains the hash field delimiter.
        """
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
        if campaign is None:
            raise CampaignNotFoundError("Campaign not found")
        if not campaign.is_active:
            raise DonationError("Campaign is no longer accepting donations")

        if FIELD_DELIMITER in description:
            raise DonationError(f"Description may not contain '{FIELD_DELIMITER}'")

        summary = DonationService.calculate_summary(amount)
        txn_ref = DonationService.generate_txn_ref()

        payment = PaymentRecord(
            txn_ref=txn_ref,
            campaign_id=campaign.id,
            method="jazzcash",
            amount=summary.amount,
            fee=summary.fee,
            total=summary.total,
            currency=summary.currency,
            phone_number=normalize_phone(phone_number),
            status=PENDING,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)

        fields = build_payment_request(
            config,
            txn_ref=txn_ref,
            amount=summary.total,
            campaign_id=campaign.id,
            description=description,
        )

        logger.info(
            "payment_initiated",
            txn_ref=txn_ref,
            campaign_id=campaign.id,
            amount=summary.amount,
            total=summary.total,
        )
        return payment, summary, fields
