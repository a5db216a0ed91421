"""
Reconciliation Writer — applies a verified callback outcome to its payment record.
"""
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import SQLAlchemyError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from donations.gateway.errors import ReconciliationError, StoreUnavailableError
from donations.gateway.outcomes import Failed, Success
from donations.gateway.response import CallbackResponse
from donations.models.payment import COMPLETED, FAILED
from donations.services.payment_store import PaymentStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    txn_ref: str
    applied: bool
    stored_status: str
    duplicate: bool = False
    conflicting: bool = False


class ReconciliationWriter:
    """Idempotent, retrying writer for callback outcomes."""

    def __init__(self, store: PaymentStore, max_attempts: int = 3, wait_seconds: float = 0.5):
        self.store = store
        self.max_attempts = max_attempts
        self.wait_seconds = wait_seconds

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.wait_seconds),
            retry=retry_if_exception_type(StoreUnavailableError),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                "store_write_retry",
                attempt=retry_state.attempt_number,
                max_attempts=self.max_attempts,
            ),
        )

    def apply(self, outcome: Success | Failed, response: CallbackResponse) -> ReconciliationResult:
        """Write ``outcome`` against the record for ``response.txn_ref``.

        Returns a result describing whether the transition happened. A record
        that is already terminal is left alone and reported as a duplicate.

        Raises:
            ReconciliationError: the record doesn't exist, or the store kept
                failing after the bounded retry.
        """
        txn_ref = outcome.txn_ref
        target = COMPLETED if isinstance(outcome, Success) else FAILED
        snapshot = response.signed_fields()

        try:
            if isinstance(outcome, Success):
                applied = self._retrying()(self.store.complete, txn_ref, outcome.transaction_id, snapshot)
            else:
                applied = self._retrying()(self.store.fail, txn_ref, outcome.reason, snapshot)

            if applied:
                logger.info("payment_reconciled", txn_ref=txn_ref, status=target)
                return ReconciliationResult(txn_ref=txn_ref, applied=True, stored_status=target)

            record = self._retrying()(self.store.find, txn_ref)
        except StoreUnavailableError as exc:
            raise ReconciliationError(
                f"Payment store unavailable after {self.max_attempts} attempts", txn_ref=txn_ref
            ) from exc
        except SQLAlchemyError as exc:
            raise ReconciliationError(f"Payment store write failed: {exc.__class__.__name__}", txn_ref=txn_ref) from exc

        return self._resolve_unapplied(txn_ref, target, record)

    def _resolve_unapplied(self, txn_ref: str, target: str, record) -> ReconciliationResult:
        if record is None:
            raise ReconciliationError("No payment record for transaction reference", txn_ref=txn_ref)

        if not record.is_terminal:
            raise ReconciliationError("Payment record still pending after conditional update", txn_ref=txn_ref)

        stored = record.status
        conflicting = stored != target
        logger.warning(
            "duplicate_callback",
            txn_ref=txn_ref,
            stored_status=stored,
            callback_status=target,
            conflicting=conflicting,
        )
        return ReconciliationResult(
            txn_ref=txn_ref,
            applied=False,
            stored_status=stored,
            duplicate=True,
            conflicting=conflicting,
        )
