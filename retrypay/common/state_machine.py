"""Payment run status transitions enforced by the retry orchestrator.

A run starts `pending` (an attempt is in flight), moves to `retrying` while it
waits out a backoff, and ends in exactly one terminal state.
"""

from enum import Enum


class PaymentStatus(str, Enum):
    """Lifecycle states of one orchestration run and of its attempts."""

    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"
    RETRYING = "retrying"


ALLOWED_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.PENDING: {PaymentStatus.SUCCESS, PaymentStatus.FAILED, PaymentStatus.RETRYING},
    PaymentStatus.RETRYING: {PaymentStatus.PENDING},
    PaymentStatus.SUCCESS: set(),
    PaymentStatus.FAILED: set(),
}


def validate_transition(current: PaymentStatus, new: PaymentStatus) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current.value} -> {new.value}")
