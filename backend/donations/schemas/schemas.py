"""
Pydantic Schemas — Request & Response models for API validation.
"""
from datetime import datetime
from typing import Optional, Dict
from pydantic import BaseModel, Field


# ──────────────── Campaign ────────────────

class CampaignCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=128)
    goal: int = Field(..., gt=0, description="Fundraising goal in PKR")
    community_id: Optional[str] = None


class CampaignResponse(BaseModel):
    id: int
    title: str
    community_id: Optional[str] = None
    goal: int
    raised: int
    donors_count: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# ──────────────── Donation / Payment ────────────────

class DonationSummary(BaseModel):
    amount: int
    fee: int
    total: int
    currency: str = "PKR"


class PaymentInitRequest(BaseModel):
    campaign_id: int
    amount: int = Field(..., gt=0, description="Donation amount in PKR")
    phone_number: str = Field(..., description="JazzCash mobile account, 03XXXXXXXXX")
    description: str = Field("Campaign donation", max_length=100)


class PaymentInitResponse(BaseModel):
    success: bool
    txn_ref: str
    status: str = "pending"
    summary: DonationSummary
    gateway_url: str
    gateway_fields: Dict[str, str]
    message: str = ""


class PaymentStatusResponse(BaseModel):
    txn_ref: str
    campaign_id: int
    status: str
    amount: int
    total: int
    currency: str
    completion_txn_id: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ──────────────── Callback Result Card ────────────────

class CallbackResultResponse(BaseModel):
    status: str                                  # success | failed | error
    title: str
    message: str
    txn_ref: Optional[str] = None
    amount: Optional[str] = None
    amount_display: Optional[str] = None          # e.g. ₨500
    transaction_id: Optional[str] = None
    auth_code: Optional[str] = None
    txn_datetime: Optional[str] = None
    response_code: Optional[str] = None
    support_notice: Optional[str] = None
