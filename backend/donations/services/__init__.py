from donations.services.payment_store import PaymentStore
from donations.services.reconciliation_service import ReconciliationWriter, ReconciliationResult
from donations.services.callback_service import CallbackService
from donations.services.donation_service import DonationService, DonationError
from donations.services.presenter import present

__all__ = [
    "PaymentStore", "ReconciliationWriter", "ReconciliationResult",
    "CallbackService", "DonationService", "DonationError", "present",
]
