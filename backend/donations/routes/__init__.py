from donations.routes.campaign import router as campaign_router
from donations.routes.payment import router as payment_router

__all__ = ["campaign_router", "payment_router"]
