"""Shared test configuration and fixtures for all tests."""

import io
import logging
import threading
import time

import pytest

from src.const import LOG_HANDLER_NAME
from src.shared.config import Config
from src.loadtest.exceptions import TransportError
from src.loadtest.models import PredictResult, RunConfig
from src.loadtest.reporter import Reporter
from .test_const import (
    TEST_ENDPOINT, TEST_BATCH_SIZE, TEST_ITERATIONS, TEST_TIMEOUT_MS, TEST_USERS,
    ROUND_TRIP_SECONDS, MODEL_LATENCY_NS
)


class FakeSession:
    """Stands in for ConnectionSession with a fixed latency and optional failure."""

    def __init__(self, round_trip_seconds=ROUND_TRIP_SECONDS, model_latency_ns=MODEL_LATENCY_NS, fail_on_call=None):
        self.round_trip_seconds = round_trip_seconds
        self.model_latency_ns = model_latency_ns
        self.fail_on_call = fail_on_call
        self.calls = 0
        self.closed = False

    def send(self):
        self.calls += 1
        if self.fail_on_call is not None and self.calls >= self.fail_on_call:
            raise TransportError(f"connection reset on call {self.calls}")
        if self.round_trip_seconds:
            time.sleep(self.round_trip_seconds)
        return PredictResult(predictions=[0.42], model_latency_ns=self.model_latency_ns)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class FakeSessionFactory:
    """Session factory recording every session it hands out.

    Sessions are created with the default kwargs, except the ones whose
    creation index appears in overrides.
    """

    def __init__(self, overrides=None, **kwargs):
        self.kwargs = kwargs
        self.overrides = overrides or {}
        self.sessions = []
        self._lock = threading.Lock()

    def __call__(self, config, settings):
        with self._lock:
            index = len(self.sessions)
            session = FakeSession(**{**self.kwargs, **self.overrides.get(index, {})})
            self.sessions.append(session)
        return session


@pytest.fixture
def settings():
    """Settings with default warmup and report interval and no settle delay."""
    return Config(warmup_calls=10, report_interval=100000, settle_delay_seconds=0.0)


@pytest.fixture
def run_config():
    """The single-user three-iteration configuration."""
    return RunConfig(
        endpoint=TEST_ENDPOINT,
        users=TEST_USERS,
        batch_size=TEST_BATCH_SIZE,
        iterations=TEST_ITERATIONS,
        timeout_ms=TEST_TIMEOUT_MS,
    )


@pytest.fixture
def output():
    """Text buffer the reporter writes to."""
    return io.StringIO()


@pytest.fixture
def reporter(output):
    """Reporter writing into the output buffer."""
    return Reporter(output)


@pytest.fixture
def session_factory():
    """Factory for sessions that answer after 5ms with a 2ms model latency."""
    return FakeSessionFactory()


@pytest.fixture(autouse=True)
def reset_console_logging():
    """Drop the console handler installed by LoggingManager after each test."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == LOG_HANDLER_NAME:
            root_logger.removeHandler(handler)
