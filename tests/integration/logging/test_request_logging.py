import logging

import pytest

from helpers import WALLET


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Capture INFO logs from the application loggers"""
    caplog.set_level(logging.INFO)
    yield


def request_records(caplog):
    return [record for record in caplog.records if record.getMessage() == "Request completed"]


def test_request_logging(client, caplog):
    """API requests are logged with the correlation ID"""
    correlation_id = "test-correlation-id"
    response = client.get("/api/v1/puzzles/today", headers={"X-Request-ID": correlation_id})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == correlation_id

    record = next(record for record in request_records(caplog) if record.request_id == correlation_id)
    assert record.method == "GET"
    assert record.path == "/api/v1/puzzles/today"
    assert record.status_code == 200
    assert record.duration_ms >= 0


def test_wallet_is_logged_from_query(client, caplog):
    client.get("/api/v1/puzzles/recommended", params={"walletAddress": WALLET})

    record = next(record for record in request_records(caplog) if record.path == "/api/v1/puzzles/recommended")
    assert record.wallet_address == WALLET


def test_request_id_generated_when_missing(client, caplog):
    response = client.get("/api/v1/health")

    assert response.headers.get("X-Request-ID")
    # Health polls stay below INFO
    assert not [record for record in request_records(caplog) if record.path == "/api/v1/health"]


def test_business_error_carries_request_id(client, caplog):
    """Rejected submissions log the error code and echo the correlation id"""
    body = {"walletAddress": WALLET, "puzzleId": 3, "move": "d4", "elapsedSeconds": 5}
    for _ in range(3):
        client.post("/api/v1/attempts", json=body)

    response = client.post("/api/v1/attempts", json=body, headers={"X-Request-ID": "rid-409"})

    assert response.status_code == 409
    assert response.json()["error"]["request_id"] == "rid-409"
    error_record = next(
        record for record in caplog.records if getattr(record, "error_code", None) == "ATTEMPTS_EXHAUSTED"
    )
    assert error_record.path == "/api/v1/attempts"
    assert error_record.request_id == "rid-409"


def test_generated_request_id_reaches_error_envelope(client):
    response = client.get("/api/v1/puzzles/404")

    assert response.status_code == 404
    assert response.json()["error"]["request_id"] == response.headers["X-Request-ID"]


def test_validation_error_is_logged(client, caplog):
    response = client.post("/api/v1/attempts", json={"invalid": "data"})
    assert response.status_code == 422

    assert any(record.status_code == 422 for record in request_records(caplog))
