"""
Validators — Rule-based validation for donation inputs.
"""
import re

MIN_DONATION = 100
MAX_DONATION = 1_000_000


def validate_phone(phone: str | None) -> bool:
    """Validate a Pakistani mobile number: 03XXXXXXXXX or +923XXXXXXXXX."""
    if not phone:
        return False
    cleaned = re.sub(r"[\s-]", "", phone)
    return bool(re.match(r"^(?:\+92|0)3\d{9}$", cleaned))


def normalize_phone(phone: str) -> str:
    """Convert to the 03XXXXXXXXX form JazzCash expects."""
    cleaned = re.sub(r"[\s-]", "", phone)
    if cleaned.startswith("+92"):
        cleaned = "0" + cleaned[3:]
    return cleaned


def validate_donation_amount(amount: int) -> tuple[bool, str]:
    """Validate a donation amount in whole rupees."""
    if amount < MIN_DONATION:
        return False, f"Minimum donation is ₨{MIN_DONATION}"
    if amount > MAX_DONATION:
        return False, f"Maximum donation is ₨{MAX_DONATION:,}"
    return True, "Valid"
