"""Payment gateway contract and a simulated gateway for demos and local runs.

In production the simulator is replaced by a client for a real payment
provider. The orchestrator only relies on `PaymentGateway.attempt` resolving
to a `Transaction` or raising `GatewayError`.
"""

import asyncio
import random
import string
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from retrypay.common.config import settings
from retrypay.common.state_machine import PaymentStatus
from retrypay.services.payments.schemas import AttemptError, PaymentRequest, Transaction

GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
DEFAULT_CURRENCY = "USD"
_ID_ALPHABET = string.digits + string.ascii_lowercase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GatewayError(Exception):
    """Payment failure reported by a gateway, tagged for the retry decision."""

    def __init__(self, message: str, code: str | None = None, retryable: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable

    def to_attempt_error(self) -> AttemptError:
        return AttemptError(message=self.message, code=self.code, retryable=bool(self.retryable))


class PaymentGateway(ABC):
    """External payment network call, abstracted as a fallible async operation."""

    @abstractmethod
    async def attempt(self, request: PaymentRequest) -> Transaction:
        """
        Submit one payment attempt.

        Raises:
            GatewayError: On payment failure; `retryable` marks transient ones.
        """
        ...


class SimulatedGateway(PaymentGateway):
    """Gateway stand-in that models transient unavailability.

    Every call waits `latency_ms`, then fails with a retryable gateway timeout
    for a `failure_rate` fraction of calls and succeeds otherwise.
    """

    def __init__(
        self,
        failure_rate: float | None = None,
        latency_ms: int | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.failure_rate = settings.gateway_failure_rate if failure_rate is None else failure_rate
        self.latency_ms = settings.gateway_latency_ms if latency_ms is None else latency_ms
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.clock = clock

    def _transaction_id(self, now: datetime) -> str:
        suffix = "".join(self.rng.choices(_ID_ALPHABET, k=9))
        return f"txn_{int(now.timestamp() * 1000)}_{suffix}"

    async def attempt(self, request: PaymentRequest) -> Transaction:
        await self.sleep(self.latency_ms / 1000)

        if self.rng.random() < self.failure_rate:
            raise GatewayError(
                "Payment gateway temporarily unavailable",
                code=GATEWAY_TIMEOUT,
                retryable=True,
            )

        now = self.clock()
        return Transaction(
            transaction_id=self._transaction_id(now),
            amount=request.amount,
            currency=request.currency or DEFAULT_CURRENCY,
            status=PaymentStatus.SUCCESS,
            processed_at=now,
        )
