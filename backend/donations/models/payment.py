"""
Payment Record Model — One row per donation attempt.

Status only ever moves pending → completed or pending → failed; the
reconciliation layer is the sole writer after initiation.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, JSON, ForeignKey

from donations.database import Base

PENDING = "pending"
COMPLETED = "completed"
FAILED = "failed"

TERMINAL_STATUSES = (COMPLETED, FAILED)


class PaymentRecord(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    txn_ref = Column(String(64), unique=True, nullable=False, index=True)  # pp_TxnRefNo
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False, index=True)

    method = Column(String(16), nullable=False, default="jazzcash")  # jazzcash | easypaisa
    amount = Column(Integer, nullable=False)      # Whole rupees
    fee = Column(Integer, nullable=False, default=0)
    total = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="PKR")
    phone_number = Column(String(16))

    # Status tracking
    status = Column(String(16), nullable=False, default=PENDING)  # pending | completed | failed
    completion_txn_id = Column(String(64), nullable=True)         # pp_RetreivalReferenceNo
    failure_reason = Column(String(256), nullable=True)
    gateway_response = Column(JSON, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
