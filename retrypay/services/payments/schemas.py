"""Request, attempt and outcome schemas for the payments service.

Attributes are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from retrypay.common.config import settings
from retrypay.common.state_machine import PaymentStatus


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentRequest(CamelModel):
    """Payment details submitted by a client.

    `amount` and `currency` stay untyped here; the validator owns those rules.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    amount: Any = None
    currency: Any = None
    customer_id: Any = None


class ValidationResult(CamelModel):
    """Outcome of validating one payment request."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class AttemptError(CamelModel):
    """Failure details captured from the gateway for one attempt."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    message: str
    code: str | None = None
    retryable: bool = False


class AttemptRecord(CamelModel):
    """One gateway attempt inside an orchestration run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    attempt_number: int = Field(ge=1)
    timestamp: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    error: AttemptError | None = None
    transaction_id: str | None = None


class Transaction(CamelModel):
    """Success payload returned by the gateway."""

    transaction_id: str
    amount: Any = None
    currency: str = "USD"
    status: PaymentStatus = PaymentStatus.SUCCESS
    processed_at: datetime


class RetryOptions(CamelModel):
    """Retry budget and base backoff for one orchestration run."""

    max_retries: int = Field(default_factory=lambda: settings.max_retries, ge=0)
    retry_delay_ms: int = Field(default_factory=lambda: settings.retry_delay_ms, ge=0)

    def backoff_seconds(self, attempt: int) -> float:
        """Delay before the retry that follows 0-indexed `attempt`."""

        return self.retry_delay_ms * (2**attempt) / 1000


class PaymentOutcome(CamelModel):
    """Full record of one orchestration run, returned once it terminates."""

    payment_details: PaymentRequest
    attempts: list[AttemptRecord] = Field(default_factory=list)
    total_attempts: int = 0
    final_status: PaymentStatus = PaymentStatus.PENDING
    started_at: datetime
    completed_at: datetime | None = None
    transaction: Transaction | None = None
    error: AttemptError | None = None
