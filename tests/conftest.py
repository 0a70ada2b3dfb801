from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

import bodytracer
from fakes import RecordingSpan

_EXPORTER = InMemorySpanExporter()
_PROVIDER = TracerProvider()
_PROVIDER.add_span_processor(SimpleSpanProcessor(_EXPORTER))
trace.set_tracer_provider(_PROVIDER)


def reset_bodytracer_config() -> None:
    """Reset the default config between tests."""
    bodytracer._reset_default_config()


import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_config() -> None:
    reset_bodytracer_config()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    _EXPORTER.clear()
    return _EXPORTER


@pytest.fixture
def recording_span() -> RecordingSpan:
    return RecordingSpan()
