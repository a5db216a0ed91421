from donations.utils.hashing import canonical_string, generate_secure_hash
from donations.utils.validators import validate_phone, validate_donation_amount

__all__ = [
    "canonical_string", "generate_secure_hash",
    "validate_phone", "validate_donation_amount",
]
