from donations.models.campaign import Campaign
from donations.models.payment import PaymentRecord

__all__ = ["Campaign", "PaymentRecord"]
