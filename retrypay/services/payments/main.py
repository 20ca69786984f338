"""HTTP surface for payment submission.

Validates request bodies, runs valid payments through the retry orchestrator,
and maps outcomes to status codes: 400 for invalid input, 200 for success and
502 once the gateway has failed for good.
"""

from datetime import datetime, timezone
from time import perf_counter
from typing import Any
from uuid import uuid4

from fastapi import Body, FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse

from retrypay.common.config import settings
from retrypay.common.logging import configure_logging, customer_id_ctx, logger, request_id_ctx
from retrypay.common.metrics import (
    http_request_duration_seconds,
    http_requests_total,
    metrics_response,
    payment_latency_seconds,
    payment_requests_total,
    validation_failures_total,
)
from retrypay.common.startup import log_startup_config
from retrypay.common.state_machine import PaymentStatus
from retrypay.common.tracing import instrument_app, setup_tracing
from retrypay.services.payments.schemas import PaymentRequest, RetryOptions
from retrypay.services.payments.service import PaymentService
from retrypay.services.payments.validation import validate

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(settings)
app = FastAPI(title="RetryPay Payments")
instrument_app(app)
service = PaymentService()


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Record request count and latency for every HTTP call."""

    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.get("/")
def info():
    """Service name, version and current server time."""

    return {
        "name": settings.service_name,
        "version": settings.service_version,
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"status": "healthy"}


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.post("/payments")
async def create_payment(
    payload: Any = Body(default=None),
    max_retries: int | None = Query(default=None, ge=0, alias="maxRetries"),
    retry_delay_ms: int | None = Query(default=None, ge=0, alias="retryDelayMs"),
    x_request_id: str | None = Header(default=None),
):
    """Validate and process one payment with retry metadata in the response."""

    request_id_ctx.set(x_request_id or str(uuid4()))
    payment_requests_total.labels(service=settings.service_name).inc()

    result = validate(payload)
    if not result.is_valid:
        validation_failures_total.labels(service=settings.service_name).inc()
        logger.info("payment rejected errors=%s", result.errors)
        return JSONResponse(status_code=400, content={"status": "error", "errors": result.errors})

    details = PaymentRequest.model_validate(payload)
    if details.customer_id is not None:
        customer_id_ctx.set(str(details.customer_id))

    overrides = {}
    if max_retries is not None:
        overrides["max_retries"] = max_retries
    if retry_delay_ms is not None:
        overrides["retry_delay_ms"] = retry_delay_ms

    with payment_latency_seconds.labels(service=settings.service_name).time():
        outcome = await service.process_with_retry(details, RetryOptions(**overrides))

    status_code = 200 if outcome.final_status == PaymentStatus.SUCCESS else 502
    return JSONResponse(
        status_code=status_code,
        content=outcome.model_dump(mode="json", by_alias=True),
    )


@app.get("/payments/status/{transaction_id}")
def get_payment_status(transaction_id: str):
    """Answer a status lookup; transactions are not persisted so status is unknown."""

    return {
        "transactionId": transaction_id,
        "status": "unknown",
        "message": "transaction records are not persisted",
    }
