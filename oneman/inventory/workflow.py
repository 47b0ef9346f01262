"""Step-by-step flow for recording a material change.

Adding or removing material is a short dialogue: the user enters an amount,
optionally picks the other group the material comes from or goes to, then
submits. ``TransferFlow`` tracks where that dialogue is so every step can be
checked without a user interface.
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Generic, Optional, TypeVar

from oneman.errors import InvalidTransition

from .ledger import parse_amount
from .models import GroupAddress

T = TypeVar("T")


class FlowState(enum.Enum):
    IDLE = "idle"
    AMOUNT_ENTERED = "amount_entered"
    SOURCE_CHOSEN = "source_chosen"
    SUBMITTING = "submitting"
    DONE = "done"
    FAILED = "failed"


class TransferFlow(Generic[T]):
    """Tracks one add, remove or transfer from amount entry to completion."""

    def __init__(self) -> None:
        self.state = FlowState.IDLE
        self.amount: Optional[float] = None
        self.counterparty: Optional[GroupAddress] = None
        self.result: Optional[T] = None
        self.error: Optional[Exception] = None

    def _expect(self, action: str, *allowed: FlowState) -> None:
        if self.state not in allowed:
            raise InvalidTransition(f"Cannot {action} while {self.state.value}.")

    def enter_amount(self, value: Any) -> None:
        """Record the amount; a failed flow starts over from here."""
        self._expect(
            "enter an amount",
            FlowState.IDLE,
            FlowState.AMOUNT_ENTERED,
            FlowState.FAILED,
        )
        self.amount = parse_amount(value)
        self.counterparty = None
        self.error = None
        self.state = FlowState.AMOUNT_ENTERED

    def choose_counterparty(self, address: GroupAddress) -> None:
        """Pick the group the material comes from or goes to."""
        self._expect("choose a group", FlowState.AMOUNT_ENTERED)
        self.counterparty = address
        self.state = FlowState.SOURCE_CHOSEN

    def skip_counterparty(self) -> None:
        """Continue without another group, for a plain add or remove."""
        self._expect("skip the group choice", FlowState.AMOUNT_ENTERED)
        self.counterparty = None
        self.state = FlowState.SOURCE_CHOSEN

    def submit(self, executor: Callable[[float, Optional[GroupAddress]], T]) -> T:
        """Run ``executor`` with the entered amount and counterparty.

        On failure the flow moves to FAILED, keeps the amount and counterparty
        for a retry, and re-raises the error.
        """
        self._expect("submit", FlowState.SOURCE_CHOSEN, FlowState.FAILED)
        assert self.amount is not None
        self.state = FlowState.SUBMITTING
        try:
            result = executor(self.amount, self.counterparty)
        except Exception as e:
            self.state = FlowState.FAILED
            self.error = e
            raise
        self.result = result
        self.error = None
        self.state = FlowState.DONE
        return result

    def reset(self) -> None:
        """Return to IDLE, discarding everything entered."""
        self._expect(
            "reset",
            FlowState.IDLE,
            FlowState.AMOUNT_ENTERED,
            FlowState.SOURCE_CHOSEN,
            FlowState.DONE,
            FlowState.FAILED,
        )
        self.state = FlowState.IDLE
        self.amount = None
        self.counterparty = None
        self.result = None
        self.error = None
