"""Payment submission with retry/backoff orchestration.

Drives sequential gateway attempts for one payment, records each attempt,
backs off exponentially between retryable failures, and returns the terminal
outcome as a value.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime

from retrypay.common.config import settings
from retrypay.common.logging import logger
from retrypay.common.metrics import (
    payment_attempts_total,
    payment_failure_total,
    payment_success_total,
    retries_total,
    retry_backoff_seconds,
)
from retrypay.common.state_machine import PaymentStatus, validate_transition
from retrypay.services.payments.gateway import GatewayError, PaymentGateway, SimulatedGateway, utcnow
from retrypay.services.payments.schemas import (
    AttemptRecord,
    PaymentOutcome,
    PaymentRequest,
    RetryOptions,
)

Sleep = Callable[[float], Awaitable[None]]
Clock = Callable[[], datetime]


def _as_request(request: PaymentRequest | Mapping) -> PaymentRequest:
    if isinstance(request, PaymentRequest):
        return request
    return PaymentRequest.model_validate(request)


def _as_options(options: RetryOptions | Mapping | None) -> RetryOptions:
    if options is None:
        return RetryOptions()
    if isinstance(options, RetryOptions):
        return options
    return RetryOptions.model_validate(options)


class PaymentService:
    """Runs payments against a gateway with automatic retry of transient failures.

    Holds no per-payment state, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = utcnow,
        service_name: str | None = None,
    ) -> None:
        self.gateway = gateway or SimulatedGateway()
        self.sleep = sleep
        self.clock = clock
        self.service_name = service_name or settings.service_name

    def _set_status(self, outcome: PaymentOutcome, status: PaymentStatus) -> None:
        validate_transition(outcome.final_status, status)
        outcome.final_status = status

    async def process_with_retry(
        self,
        request: PaymentRequest | Mapping,
        options: RetryOptions | Mapping | None = None,
    ) -> PaymentOutcome:
        """Attempt the payment up to `max_retries + 1` times.

        Success and terminal failure are both returned as a `PaymentOutcome`.
        Only exceptions other than `GatewayError` escape, since those mean the
        gateway broke its contract.
        """

        details = _as_request(request)
        opts = _as_options(options)
        outcome = PaymentOutcome(payment_details=details, started_at=self.clock())

        for attempt in range(opts.max_retries + 1):
            outcome.total_attempts = attempt + 1
            attempt_number = attempt + 1
            started = self.clock()

            try:
                transaction = await self.gateway.attempt(details)
            except GatewayError as exc:
                error = exc.to_attempt_error()
                outcome.attempts.append(
                    AttemptRecord(
                        attempt_number=attempt_number,
                        timestamp=started,
                        status=PaymentStatus.FAILED,
                        error=error,
                    )
                )
                payment_attempts_total.labels(service=self.service_name, result="failed").inc()

                if not error.retryable or attempt == opts.max_retries:
                    break

                backoff = opts.backoff_seconds(attempt)
                self._set_status(outcome, PaymentStatus.RETRYING)
                retries_total.labels(service=self.service_name, dependency="gateway").inc()
                retry_backoff_seconds.labels(service=self.service_name).observe(backoff)
                logger.warning(
                    "gateway failure attempt=%s code=%s backoff_s=%s",
                    attempt_number,
                    error.code,
                    backoff,
                )
                await self.sleep(backoff)
                self._set_status(outcome, PaymentStatus.PENDING)
                continue

            outcome.attempts.append(
                AttemptRecord(
                    attempt_number=attempt_number,
                    timestamp=started,
                    status=PaymentStatus.SUCCESS,
                    transaction_id=transaction.transaction_id,
                )
            )
            payment_attempts_total.labels(service=self.service_name, result="success").inc()
            self._set_status(outcome, PaymentStatus.SUCCESS)
            outcome.completed_at = self.clock()
            outcome.transaction = transaction
            payment_success_total.labels(service=self.service_name).inc()
            logger.info(
                "payment succeeded transaction_id=%s attempts=%s",
                transaction.transaction_id,
                outcome.total_attempts,
            )
            return outcome

        # Only a terminal gateway failure breaks out of the loop.
        self._set_status(outcome, PaymentStatus.FAILED)
        outcome.completed_at = self.clock()
        outcome.error = error
        reason = "retries_exhausted" if error.retryable else "non_retryable"
        payment_failure_total.labels(service=self.service_name, reason=reason).inc()
        logger.error(
            "payment failed attempts=%s code=%s reason=%s",
            outcome.total_attempts,
            error.code,
            reason,
        )
        return outcome


async def process_with_retry(
    request: PaymentRequest | Mapping,
    options: RetryOptions | Mapping | None = None,
    gateway: PaymentGateway | None = None,
) -> PaymentOutcome:
    """Run one payment through a fresh `PaymentService`."""

    return await PaymentService(gateway).process_with_retry(request, options)
