"""Capture orchestration: eligibility, duplication, redaction and span attachment."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

from ..exceptions import BodyReadError
from ..models import BodySnapshot, CapturedBody, CaptureReason, ContentKind
from .capture_config import CaptureConfig
from .content import PARSEABLE_KINDS, check_size, classify, parse_body, truncate_utf8
from .spans import SpanHandle

logger = logging.getLogger(__name__)

ELIGIBLE_METHODS = frozenset({"POST", "PUT", "PATCH"})


class RequestLike(Protocol):
    """What the orchestrator needs from a host framework's request.

    ``read_body`` is the duplication primitive: it must return the body
    without consuming the stream the framework's own handler reads.
    """

    @property
    def method(self) -> str: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    async def read_body(self) -> BodySnapshot: ...


def is_eligible(method: str, span: SpanHandle | None, config: CaptureConfig) -> bool:
    return config.enabled and span is not None and method.upper() in ELIGIBLE_METHODS


def header_value(headers: Mapping[str, str], name: str) -> str:
    """Case-insensitive header lookup; missing headers read as an empty string."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return ""


def build_captured_body(
    kind: ContentKind,
    snapshot: BodySnapshot | None,
    config: CaptureConfig,
) -> CapturedBody:
    """Turn a duplicated body into a capture result. Pure; never reads anything."""
    if kind == ContentKind.MULTIPART:
        return CapturedBody(
            captured=False,
            content_kind=ContentKind.MULTIPART,
            reason=CaptureReason.UNSUPPORTED_TYPE,
        )
    if kind not in PARSEABLE_KINDS:
        return CapturedBody(
            captured=False, content_kind=kind, reason=CaptureReason.UNSUPPORTED_TYPE
        )
    if snapshot is None:
        return CapturedBody(
            captured=False, content_kind=kind, reason=CaptureReason.STREAM_UNAVAILABLE
        )

    size = snapshot.total_size
    if not check_size(size, config):
        return CapturedBody(
            captured=False,
            content_kind=kind,
            original_byte_size=size,
            reason=CaptureReason.TOO_LARGE,
        )
    if not snapshot.complete:
        return CapturedBody(
            captured=False,
            content_kind=kind,
            original_byte_size=size,
            reason=CaptureReason.STREAM_UNAVAILABLE,
        )

    parsed = parse_body(
        kind,
        snapshot.data,
        config.sensitive_fields,
        preview_limit=config.max_body_bytes,
        redact_embedded_graphql=config.redact_embedded_graphql,
    )
    return CapturedBody(
        captured=True,
        body=truncate_utf8(parsed.text, config.max_body_bytes),
        content_kind=kind,
        original_byte_size=size,
        reason=CaptureReason.PARSE_ERROR if parsed.parse_error else None,
        parse_error=parsed.parse_error,
    )


async def duplicate_body(
    request: RequestLike, config: CaptureConfig
) -> BodySnapshot | CaptureReason:
    """Read the request's duplicated body, reporting failures as a reason."""
    try:
        return await asyncio.wait_for(request.read_body(), timeout=config.capture_timeout)
    except TimeoutError:
        return CaptureReason.TIMEOUT
    except BodyReadError as exc:
        logger.debug("bodytracer: request body unavailable for capture: %s", exc)
        return CaptureReason.STREAM_UNAVAILABLE


async def capture_request(request: RequestLike, config: CaptureConfig) -> CapturedBody | None:
    """Classify, duplicate and redact one request body. ``None`` means skip silently."""
    kind = classify(header_value(request.headers, "content-type"))
    if kind == ContentKind.UNSUPPORTED:
        return None
    if kind == ContentKind.MULTIPART:
        return build_captured_body(kind, None, config)

    snapshot = await duplicate_body(request, config)
    if isinstance(snapshot, CaptureReason):
        return CapturedBody(captured=False, content_kind=kind, reason=snapshot)
    return build_captured_body(kind, snapshot, config)


def attach(span: SpanHandle, result: CapturedBody) -> None:
    attributes = result.to_span_attributes()
    if attributes:
        span.set_attributes(attributes)


async def capture_and_attach(
    request: RequestLike,
    active_span: SpanHandle | None,
    config: CaptureConfig,
) -> CapturedBody | None:
    """Capture ``request``'s body onto ``active_span``. Never raises.

    Returns the capture result for callers that want it, or ``None`` when
    the request was not eligible or capture failed unexpectedly.
    """
    try:
        if active_span is None or not is_eligible(request.method, active_span, config):
            return None
        result = await capture_request(request, config)
        if result is not None:
            attach(active_span, result)
        return result
    except Exception:
        logger.debug("bodytracer: body capture failed", exc_info=True)
        return None
