"""
Callback Outcomes — the three terminal results of a callback and the
state machine that produces exactly one of them.

    LOADING → SUCCESS | FAILED | ERROR
"""
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from donations.gateway.errors import InvalidStateTransition


class CallbackState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"


@dataclass(frozen=True)
class Success:
    """Gateway captured the payment."""

    state: ClassVar[CallbackState] = CallbackState.SUCCESS

    txn_ref: str
    amount: str
    currency: str
    transaction_id: str
    auth_code: str = ""
    txn_datetime: str = ""
    campaign_id: str = ""
    description: str = ""
    reconciliation_error: Optional[str] = None


@dataclass(frozen=True)
class Failed:
    """Gateway declined or otherwise rejected the payment."""

    state: ClassVar[CallbackState] = CallbackState.FAILED

    txn_ref: str
    response_code: str
    reason: str
    reconciliation_error: Optional[str] = None


@dataclass(frozen=True)
class Error:
    """The callback could not be trusted or parsed; payment state is unknown."""

    state: ClassVar[CallbackState] = CallbackState.ERROR

    reason: str
    txn_ref: str = ""


CallbackOutcome = Union[Success, Failed, Error]


class CallbackFlow:
    """Single-use state holder for one callback invocation."""

    def __init__(self):
        self.state = CallbackState.LOADING
        self.outcome: Optional[CallbackOutcome] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != CallbackState.LOADING

    def finish(self, outcome: CallbackOutcome) -> CallbackOutcome:
        if self.is_terminal:
            raise InvalidStateTransition(
                f"Callback already finished as {self.state.value}",
                txn_ref=getattr(outcome, "txn_ref", ""),
            )
        self.state = outcome.state
        self.outcome = outcome
        return outcome
