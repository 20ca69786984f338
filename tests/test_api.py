"""HTTP-level tests for the payments app."""

import pytest
from fastapi.testclient import TestClient

from retrypay.services.payments import main
from retrypay.services.payments.gateway import GatewayError
from retrypay.services.payments.service import PaymentService

from conftest import RecordingSleep, ScriptedGateway, make_transaction


@pytest.fixture
def client():
    return TestClient(main.app)


def use_gateway(monkeypatch, script):
    gateway = ScriptedGateway(script)
    sleep = RecordingSleep()
    monkeypatch.setattr(main, "service", PaymentService(gateway, sleep=sleep))
    return gateway, sleep


def test_info(client):
    """Root endpoint reports name, status and time."""

    resp = client.get("/")
    data = resp.json()
    assert resp.status_code == 200
    assert data["status"] == "ok"
    assert data["name"]
    assert data["timestamp"]


def test_health(client):
    """Health probe answers healthy."""

    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_metrics(client):
    """Metrics endpoint exposes payment counters."""

    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "payment_requests_total" in resp.text


@pytest.mark.parametrize("body", [{}, {"amount": -50}, {"amount": 100, "currency": "INVALID"}])
def test_invalid_payment_returns_400(client, body):
    """Invalid bodies are rejected with their errors."""

    resp = client.post("/payments", json=body)
    data = resp.json()
    assert resp.status_code == 400
    assert data["status"] == "error"
    assert data["errors"]


def test_missing_body_returns_400(client):
    """An empty body means missing payment details."""

    resp = client.post("/payments")
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["payment details required"]


def test_amount_over_limit(client):
    """Amounts over the maximum are rejected."""

    resp = client.post("/payments", json={"amount": 50000})
    assert resp.status_code == 400
    assert any("exceeds maximum" in error for error in resp.json()["errors"])


def test_amount_beyond_float_range_is_rejected(client):
    """A 400-digit amount is a validation error, not a server error."""

    resp = client.post(
        "/payments",
        content="{\"amount\": " + "9" * 400 + "}",
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["amount exceeds maximum allowed (10000)"]


def test_successful_payment(client, monkeypatch):
    """A successful run returns 200 with the outcome."""

    use_gateway(monkeypatch, [make_transaction("txn_ok")])

    resp = client.post("/payments", json={"amount": 100, "currency": "USD", "customerId": "c-1"})
    data = resp.json()

    assert resp.status_code == 200
    assert data["finalStatus"] == "success"
    assert data["totalAttempts"] == 1
    assert data["transaction"]["transactionId"] == "txn_ok"
    assert data["startedAt"] and data["completedAt"]


def test_exhausted_payment_returns_502(client, monkeypatch):
    """Exhausted retries return 502 with every attempt."""

    _, sleep = use_gateway(
        monkeypatch,
        [GatewayError("Payment gateway temporarily unavailable", code="GATEWAY_TIMEOUT", retryable=True)],
    )

    resp = client.post("/payments?maxRetries=1&retryDelayMs=5", json={"amount": 100})
    data = resp.json()

    assert resp.status_code == 502
    assert data["finalStatus"] == "failed"
    assert data["totalAttempts"] == 2
    assert len(data["attempts"]) == 2
    assert data["error"]["code"] == "GATEWAY_TIMEOUT"
    assert sleep.delays == [0.005]


def test_negative_max_retries_is_rejected(client):
    """Negative retry budgets fail request parsing."""

    resp = client.post("/payments?maxRetries=-1", json={"amount": 100})
    assert resp.status_code == 422


def test_status_lookup(client):
    """Status lookup echoes the transaction id."""

    resp = client.get("/payments/status/txn_123")
    assert resp.status_code == 200
    assert resp.json()["transactionId"] == "txn_123"
