"""
Callback Service — the flow boundary for gateway redirects.

parse → verify → interpret → reconcile. Every failure along the way ends
in exactly one of Success, Failed or Error; nothing propagates further.
"""
from dataclasses import replace
from typing import Any, Mapping

import structlog

from donations.config import GatewayConfig
from donations.gateway.codes import interpret
from donations.gateway.errors import MalformedCallbackError, ReconciliationError, VerificationError
from donations.gateway.outcomes import CallbackFlow, CallbackOutcome, Error
from donations.gateway.response import parse_callback, require_fields
from donations.gateway.signature import SignatureVerifier
from donations.services.reconciliation_service import ReconciliationWriter

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("txn_ref", "response_code", "amount")

RECONCILIATION_NOTICES = {
    "success": "Your payment was processed, but there was an issue updating our records. Please contact support.",
    "failed": "There was an issue recording this payment attempt. Please contact support if you were charged.",
}

CONFLICTING_CALLBACK_NOTICE = (
    "This payment was already recorded with a different result. Please contact support before trying again."
)


class CallbackService:
    """Handles one gateway callback per call to ``handle``."""

    def __init__(self, config: GatewayConfig, writer: ReconciliationWriter):
        self.config = config
        self.verifier = SignatureVerifier(config)
        self.writer = writer

    def handle(self, params: Mapping[str, Any]) -> CallbackOutcome:
        flow = CallbackFlow()
        response = parse_callback(params)
        log = logger.bind(txn_ref=response.txn_ref)

        try:
            self.verifier.verify_or_raise(response)
            log.info("callback_verified", response_code=response.response_code)
            require_fields(response, *REQUIRED_FIELDS)
            outcome = interpret(response, self.config.bill_reference_prefix)
        except VerificationError as exc:
            log.warning("signature_mismatch", reason=exc.message)
            return flow.finish(Error(reason=exc.message, txn_ref=response.txn_ref))
        except MalformedCallbackError as exc:
            log.warning("malformed_callback", missing_fields=exc.missing_fields)
            return flow.finish(Error(reason=exc.message, txn_ref=response.txn_ref))
        except Exception:
            log.exception("callback_processing_error")
            return flow.finish(Error(reason="An unexpected error occurred", txn_ref=response.txn_ref))

        try:
            result = self.writer.apply(outcome, response)
        except ReconciliationError as exc:
            # The gateway result stands; the store is reconciled by hand.
            log.error("reconciliation_failed", reason=exc.message, outcome=outcome.state.value)
            outcome = replace(outcome, reconciliation_error=RECONCILIATION_NOTICES[outcome.state.value])
        except Exception:
            log.exception("reconciliation_failed", outcome=outcome.state.value)
            outcome = replace(outcome, reconciliation_error=RECONCILIATION_NOTICES[outcome.state.value])
        else:
            if result.conflicting:
                outcome = replace(outcome, reconciliation_error=CONFLICTING_CALLBACK_NOTICE)

        return flow.finish(outcome)
