"""
Payment Store — SQLAlchemy access to payment records for reconciliation.

Both mutators are compare-and-set: the row only changes while it is still
``pending``, so a redelivered callback can never overwrite a terminal record.
"""
from datetime import datetime
from typing import Optional, Dict

from sqlalchemy import update
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from donations.gateway.errors import StoreUnavailableError
from donations.models.campaign import Campaign
from donations.models.payment import PaymentRecord, PENDING, COMPLETED, FAILED

TRANSIENT_ERRORS = (OperationalError, DisconnectionError)


class PaymentStore:
    """Payment record reads and conditional status transitions."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, txn_ref: str) -> Optional[PaymentRecord]:
        try:
            return self.db.query(PaymentRecord).filter(PaymentRecord.txn_ref == txn_ref).first()
        except TRANSIENT_ERRORS as exc:
            self.db.rollback()
            raise StoreUnavailableError(f"Payment store unavailable: {exc}", txn_ref=txn_ref) from exc

    def complete(self, txn_ref: str, completion_id: str, gateway_response: Optional[Dict] = None) -> bool:
        """pending → completed, crediting the campaign in the same transaction."""
        now = datetime.utcnow()
        return self._transition(
            txn_ref,
            dict(
                status=COMPLETED,
                completion_txn_id=completion_id or None,
                gateway_response=gateway_response or {},
                completed_at=now,
                updated_at=now,
            ),
            credit_campaign=True,
        )

    def fail(self, txn_ref: str, reason: str, gateway_response: Optional[Dict] = None) -> bool:
        """pending → failed with the interpreted decline reason."""
        return self._transition(
            txn_ref,
            dict(
                status=FAILED,
                failure_reason=reason[:256],
                gateway_response=gateway_response or {},
                updated_at=datetime.utcnow(),
            ),
        )

    def _transition(self, txn_ref: str, values: Dict, credit_campaign: bool = False) -> bool:
        try:
            result = self.db.execute(
                update(PaymentRecord)
                .where(PaymentRecord.txn_ref == txn_ref, PaymentRecord.status == PENDING)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            applied = result.rowcount == 1

            if applied and credit_campaign:
                record = self.db.query(PaymentRecord).filter(PaymentRecord.txn_ref == txn_ref).one()
                self.db.execute(
                    update(Campaign)
                    .where(Campaign.id == record.campaign_id)
                    .values(raised=Campaign.raised + record.amount, donors_count=Campaign.donors_count + 1)
                    .execution_options(synchronize_session=False)
                )

            self.db.commit()
            return applied
        except TRANSIENT_ERRORS as exc:
            self.db.rollback()
            raise StoreUnavailableError(f"Payment store unavailable: {exc}", txn_ref=txn_ref) from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise
