import pytest
import json
import itertools
from fastapi import FastAPI
from starlette.testclient import TestClient
from unittest.mock import patch
from app.core.logging_middleware import StructuredLoggingMiddleware

# Setup a simple app for testing middleware
app = FastAPI()
app.add_middleware(StructuredLoggingMiddleware)


@app.get("/normal")
async def normal_request():
    return {"message": "ok"}


@app.get("/recipes/{recipe_id}")
async def recipe_request(recipe_id: str):
    return {"recipe_id": recipe_id}


@app.delete("/recipes/{recipe_id}")
async def delete_request(recipe_id: str):
    return {"message": "deleted"}


@app.get("/error")
async def error_request():
    raise ValueError("planned error")


client = TestClient(app)


@pytest.fixture
def mock_logger():
    with patch("app.core.logging_middleware.structured_logger") as mock:
        yield mock


def logged_payload(mock_logger):
    assert mock_logger.info.called
    return json.loads(mock_logger.info.call_args[0][0])


def test_logs_error_request(mock_logger):
    # BaseHTTPMiddleware re-raises; the middleware must log before that happens
    with pytest.raises(ValueError):
        client.get("/error")

    log_data = logged_payload(mock_logger)
    assert log_data["status_code"] == 500
    assert "planned error" in log_data["error"]


def test_logs_slow_request(mock_logger):
    # Patch time MODULE in the middleware file, so we control it completely
    with patch("app.core.logging_middleware.time") as mock_time:
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    log_data = logged_payload(mock_logger)
    # 1000.6 - 1000.0 = 0.6s = 600ms
    assert log_data["duration_ms"] >= 500
    assert log_data["error"] is None


def test_logs_recipe_id_and_write_flag(mock_logger):
    with patch("app.core.logging_middleware.time") as mock_time:
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.delete("/recipes/abc123")

    log_data = logged_payload(mock_logger)
    assert log_data["method"] == "DELETE"
    assert log_data["path"] == "/recipes/abc123"
    assert log_data["recipe_id"] == "abc123"
    assert log_data["is_write"] is True


def test_logs_query_params(mock_logger):
    with patch("app.core.logging_middleware.time") as mock_time:
        mock_time.perf_counter.side_effect = [1000.0, 1000.6]
        mock_time.time.return_value = 1700000000.0

        client.get("/recipes/xyz", params={"page": "2"})

    log_data = logged_payload(mock_logger)
    assert log_data["query_params"] == {"page": "2"}
    assert log_data["is_write"] is False


def test_samples_normal_request(mock_logger):
    # Force random below the sample rate and time to be fast
    with (
        patch("random.random", return_value=0.01),
        patch("app.core.logging_middleware.time") as mock_time,
    ):
        mock_time.perf_counter.side_effect = [100.0, 100.1]  # 100ms
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert mock_logger.info.called


def test_ignores_normal_request(mock_logger):
    # Force random above the sample rate and time to be fast
    with (
        patch("random.random", return_value=0.10),
        patch("app.core.logging_middleware.time") as mock_time,
    ):
        # Use iterator to avoid StopIteration if framework makes extra calls
        mock_time.perf_counter.side_effect = itertools.count(start=100.0, step=0.1)
        mock_time.time.return_value = 1700000000.0

        client.get("/normal")

    assert not mock_logger.info.called
