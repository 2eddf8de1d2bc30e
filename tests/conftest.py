"""
Pytest fixtures for the shapey test suite.

Provides:
- Logging isolation between tests (handlers, levels and LogContext)
- A JSON log capture helper for asserting on structured records
- The shared sample data used by the reshaping scenarios
"""

import json
import logging
from io import StringIO

import pytest

from shapey_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


class JSONLogCapture:
    """Collects the JSON lines written by a StructuredFormatter handler."""

    def __init__(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(StructuredFormatter())

    @property
    def records(self) -> list[dict]:
        lines = self.stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [r["message"] for r in self.records]


@pytest.fixture
def json_logs() -> JSONLogCapture:
    """shapey logging configured at DEBUG into an in-memory JSON capture."""
    capture = JSONLogCapture()
    configure_logging(level=logging.DEBUG, handler=capture.handler)
    return capture


@pytest.fixture
def numbers() -> list[int]:
    """Twelve numbers summing to 1800 (average 150)."""
    return [100, 200, 150, 50, 300, 100, 150, 250, 100, 150, 100, 150]


@pytest.fixture
def jims() -> dict:
    return {"morrison": "jim", "hendrix": "jim", "carter": "jim"}
