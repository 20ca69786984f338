"""Structural and business-rule checks for incoming payment requests."""

import math
import numbers
import re
from collections.abc import Mapping
from typing import Any

from retrypay.services.payments.schemas import PaymentRequest, ValidationResult

MAX_PAYMENT_AMOUNT = 10000
CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")

DETAILS_REQUIRED = "payment details required"
AMOUNT_NOT_POSITIVE = "amount must be a positive number"
AMOUNT_EXCEEDS_MAXIMUM = f"amount exceeds maximum allowed ({MAX_PAYMENT_AMOUNT})"
CURRENCY_INVALID = "currency must be a valid 3-letter ISO code"


def _field(request: Mapping | PaymentRequest, name: str) -> Any:
    if isinstance(request, Mapping):
        return request.get(name)
    return getattr(request, name, None)


def _is_number(value: Any) -> bool:
    # bool is an int subclass; NaN compares false against everything.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    # Only floats can be NaN; ints beyond float range must not be converted.
    return not (isinstance(value, float) and math.isnan(value))


def validate(request: Mapping | PaymentRequest | None) -> ValidationResult:
    """Collect every rule violation of `request` in check order.

    Amount checks run before the currency check. The positive and maximum
    checks are independent, so a single numeric amount trips at most one.
    A missing currency is valid; it defaults to USD downstream.
    """

    if request is None or not isinstance(request, (Mapping, PaymentRequest)):
        return ValidationResult(is_valid=False, errors=[DETAILS_REQUIRED])

    errors: list[str] = []
    amount = _field(request, "amount")
    if not _is_number(amount) or amount <= 0:
        errors.append(AMOUNT_NOT_POSITIVE)
    if _is_number(amount) and amount > MAX_PAYMENT_AMOUNT:
        errors.append(AMOUNT_EXCEEDS_MAXIMUM)

    currency = _field(request, "currency")
    if currency is not None and not (
        isinstance(currency, str) and CURRENCY_PATTERN.fullmatch(currency)
    ):
        errors.append(CURRENCY_INVALID)

    return ValidationResult(is_valid=not errors, errors=errors)
