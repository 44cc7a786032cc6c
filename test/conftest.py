from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, List

import logfire
import pytest
from dotenv import load_dotenv
from logfire.testing import TestExporter
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

# Load dotenv files early so test fixtures can read settings via os.getenv
TEST_ROOT = Path(__file__).resolve().parent
# Load test/.env first, then fallback to test/.env.example for defaults
load_dotenv(TEST_ROOT / ".env", override=False)
load_dotenv(TEST_ROOT / ".env.example", override=False)

# Import test settings after dotenv is loaded
from actionkit_ai.action.tracing import TracingState, reset_default_tracing_state
from test.settings import test_settings


@pytest.fixture(scope="session")
def test_config():
    """Fixture providing test configuration from Pydantic settings model.

    Returns:
        TestSettings: Test configuration with all environment variables loaded
    """
    return test_settings


@pytest.fixture(autouse=True)
def _reset_default_tracing_state() -> Iterator[None]:
    """Every test starts and ends without a process-wide default tracing scope."""
    reset_default_tracing_state()
    yield
    reset_default_tracing_state()


@pytest.fixture
def span_exporter() -> TestExporter:
    return TestExporter()


@pytest.fixture
def local_logfire(span_exporter: TestExporter) -> logfire.Logfire:
    """A Logfire instance exporting to memory only, isolated from the global one."""
    return logfire.configure(
        local=True,
        send_to_logfire=False,
        console=False,
        metrics=False,
        inspect_arguments=False,
        additional_span_processors=[SimpleSpanProcessor(span_exporter)],
    )


@pytest.fixture
def tracing_state(local_logfire: logfire.Logfire) -> TracingState:
    return TracingState(local_logfire)


@pytest.fixture
def finished_spans(span_exporter: TestExporter) -> Callable[[], List[ReadableSpan]]:
    """Completed spans in end order, without Logfire's pending-span placeholders."""

    def _collect() -> List[ReadableSpan]:
        return [
            span
            for span in span_exporter.exported_spans
            if (span.attributes or {}).get("logfire.span_type") != "pending_span"
        ]

    return _collect
