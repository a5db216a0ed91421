"""
Payment Request Builder — the signed form the donor's browser posts to
JazzCash to start a mobile-wallet payment.
"""
from datetime import datetime, timedelta

from donations.config import GatewayConfig
from donations.utils.hashing import SECURE_HASH_FIELD, generate_secure_hash

API_VERSION = "1.1"
TXN_TYPE = "MWALLET"
DATETIME_FORMAT = "%Y%m%d%H%M%S"
REQUEST_EXPIRY = timedelta(days=1)


def build_payment_request(
    config: GatewayConfig,
    txn_ref: str,
    amount: int,
    campaign_id: int | str,
    description: str,
    now: datetime | None = None,
) -> dict[str, str]:
    """Return every ``pp_*`` form field, including the secure hash."""
    now = now or datetime.now()
    fields = {
        "pp_Version": API_VERSION,
        "pp_TxnType": TXN_TYPE,
        "pp_Language": "EN",
        "pp_MerchantID": config.merchant_id,
        "pp_Password": config.password,
        "pp_TxnRefNo": txn_ref,
        "pp_Amount": str(amount),
        "pp_TxnCurrency": "PKR",
        "pp_TxnDateTime": now.strftime(DATETIME_FORMAT),
        "pp_BillReference": f"{config.bill_reference_prefix}{campaign_id}",
        "pp_Description": description,
        "pp_TxnExpiryDateTime": (now + REQUEST_EXPIRY).strftime(DATETIME_FORMAT),
        "pp_ReturnURL": config.return_url,
    }
    fields[SECURE_HASH_FIELD] = generate_secure_hash(fields, config.integrity_salt)
    return fields
