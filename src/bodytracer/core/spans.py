"""Seam between the capture engine and the OpenTelemetry tracing API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from opentelemetry import trace

from ..models import AttributeValue

TRACER_NAME = "bodytracer"


@runtime_checkable
class SpanHandle(Protocol):
    """The only span capability the capture engine needs."""

    def set_attributes(self, attributes: Mapping[str, AttributeValue]) -> None: ...


def get_active_span() -> trace.Span | None:
    """Return the current recording span, or ``None`` when there is nothing to attach to."""
    span = trace.get_current_span()
    if not span.get_span_context().is_valid or not span.is_recording():
        return None
    return span


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME)
