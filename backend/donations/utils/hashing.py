"""
Cryptographic Hashing Utilities — JazzCash secure hash (HMAC-SHA256).
"""
import hashlib
import hmac
from typing import Mapping

SECURE_HASH_FIELD = "pp_SecureHash"
FIELD_DELIMITER = "&"


def canonical_string(fields: Mapping[str, str], integrity_salt: str) -> str:
    """Build the string the gateway signs.

    Field values are ordered by field name, empty values are skipped, the
    secure hash itself is never included, and the integrity salt leads:
    ``salt&value1&value2...``.
    """
    values = [
        fields[name]
        for name in sorted(fields)
        if name != SECURE_HASH_FIELD and fields[name] != ""
    ]
    return FIELD_DELIMITER.join([integrity_salt, *values])


def generate_secure_hash(fields: Mapping[str, str], integrity_salt: str) -> str:
    """HMAC-SHA256 of the canonical string keyed with the integrity salt (upper-case hex)."""
    message = canonical_string(fields, integrity_salt).encode("utf-8")
    return hmac.new(integrity_salt.encode("utf-8"), message, hashlib.sha256).hexdigest().upper()
