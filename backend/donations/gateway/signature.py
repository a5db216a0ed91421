"""
Signature Verifier — authenticates gateway callbacks.

The redirect reaches us through the donor's browser, so the secure hash is
the only integrity guarantee on the parameters. Verification fails closed.
"""
import hmac
import re

import structlog

from donations.config import GatewayConfig
from donations.gateway.errors import VerificationError
from donations.gateway.response import CallbackResponse
from donations.utils.hashing import FIELD_DELIMITER, generate_secure_hash

logger = structlog.get_logger(__name__)

_HASH_PATTERN = re.compile(r"^[0-9A-Fa-f]{64}$")


class SignatureVerifier:
    """Recomputes the JazzCash secure hash and compares it in constant time."""

    def __init__(self, config: GatewayConfig):
        self.config = config

    def expected_hash(self, response: CallbackResponse) -> str:
        return generate_secure_hash(response.signed_fields(), self.config.integrity_salt)

    def verify(self, response: CallbackResponse) -> bool:
        if not self.config.integrity_salt:
            logger.error("integrity_salt_not_configured", txn_ref=response.txn_ref)
            return False

        received = response.secure_hash
        if not _HASH_PATTERN.match(received):
            return False

        # The canonical string cannot tell "a&b" in one field from "a" and "b" in two.
        smuggled = [name for name, value in response.signed_fields().items() if FIELD_DELIMITER in value]
        if smuggled:
            logger.warning("delimiter_in_signed_field", txn_ref=response.txn_ref, fields=smuggled)
            return False

        return hmac.compare_digest(self.expected_hash(response), received.upper())

    def verify_or_raise(self, response: CallbackResponse) -> None:
        if not response.secure_hash:
            raise VerificationError("Callback is missing its secure hash", txn_ref=response.txn_ref)
        if not self.verify(response):
            raise VerificationError("Invalid payment response - security verification failed", txn_ref=response.txn_ref)
