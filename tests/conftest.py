"""Shared fixtures: deterministic gateways and a recording sleep."""

import os

os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("GATEWAY_LATENCY_MS", "0")

from datetime import datetime, timedelta, timezone

import pytest

from retrypay.services.payments.gateway import PaymentGateway
from retrypay.services.payments.schemas import Transaction


class ScriptedGateway(PaymentGateway):
    """Gateway replaying a fixed script of results; exceptions are raised."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = []

    async def attempt(self, request):
        self.calls.append(request)
        result = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingSleep:
    """Async sleep stand-in that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class TickingClock:
    """Clock advancing one second per call."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def make_transaction(transaction_id="txn_test_1", amount=100, currency="USD"):
    return Transaction(
        transaction_id=transaction_id,
        amount=amount,
        currency=currency,
        processed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def clock():
    return TickingClock()
