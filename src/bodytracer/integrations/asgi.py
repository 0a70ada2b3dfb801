"""ASGI middleware that tees the request body as the application reads it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from opentelemetry import trace
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.background import spawn
from ..core.capture_config import CaptureConfig
from ..core.content import classify
from ..core.metadata import extract_request_metadata
from ..core.orchestrator import capture_and_attach, is_eligible
from ..core.spans import SpanHandle, get_active_span, get_tracer
from ..exceptions import BodyReadError
from ..models import BodySnapshot, CapturedBody, ContentKind

logger = logging.getLogger(__name__)


class BodyTee:
    """Copy of the body chunks an application pulls from ``receive``.

    Stores at most ``limit`` bytes but counts every byte, so an oversized
    body is reported with its real size without being held in memory.
    """

    def __init__(self, limit: int) -> None:
        self._limit = limit
        self._chunks: list[bytes] = []
        self._kept = 0
        self._total = 0
        self.finished = False

    def feed(self, chunk: bytes) -> None:
        self._total += len(chunk)
        room = self._limit - self._kept
        if room > 0 and chunk:
            kept = chunk[:room]
            self._chunks.append(kept)
            self._kept += len(kept)

    def snapshot(self) -> BodySnapshot:
        if not self.finished:
            raise BodyReadError("request body has not been fully read")
        return BodySnapshot(data=b"".join(self._chunks), total_size=self._total)


class ASGIRequestView:
    """``RequestLike`` over an ASGI scope whose body is teed."""

    def __init__(self, scope: Scope, tee: BodyTee | None) -> None:
        self._scope = scope
        self._headers = Headers(scope=scope)
        self._tee = tee

    @property
    def method(self) -> str:
        return str(self._scope.get("method", ""))

    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    async def read_body(self) -> BodySnapshot:
        if self._tee is None:
            raise BodyReadError("request body was not teed")
        return self._tee.snapshot()


class BodyCaptureMiddleware:
    """Capture redacted request bodies onto the active span.

    The application receives exactly the messages it would have received
    without this middleware; the body is copied as it passes through. Once
    the final chunk has been handed over, capture runs as a background task.
    If the application never reads the body, nothing is captured.

    Place it inside the OpenTelemetry ASGI middleware so a server span is
    active, or set ``ensure_span`` on the config to start one here.
    """

    def __init__(self, app: ASGIApp, config: CaptureConfig | None = None) -> None:
        if config is None:
            from .. import get_config

            config = get_config()
        self.app = app
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        span = get_active_span()
        if span is not None or not self.config.ensure_span:
            await self._handle(scope, receive, send, span)
            return

        name = f"{scope.get('method', 'HTTP')} {scope.get('path', '')}".strip()
        with get_tracer().start_as_current_span(name, kind=trace.SpanKind.SERVER) as created:
            pending = await self._handle(scope, receive, send, created)
            if pending is not None:
                await asyncio.wait({pending}, timeout=self.config.capture_timeout)

    async def _handle(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
        span: SpanHandle | None,
    ) -> asyncio.Task[CapturedBody | None] | None:
        view = ASGIRequestView(scope, None)
        if span is not None and self.config.capture_metadata:
            self._attach_metadata(scope, view, span)

        if span is None or not is_eligible(view.method, span, self.config):
            await self.app(scope, receive, send)
            return None

        kind = classify(view.headers.get("content-type"))
        if kind == ContentKind.UNSUPPORTED:
            await self.app(scope, receive, send)
            return None
        if kind == ContentKind.MULTIPART:
            task = self._launch(view, span)
            await self.app(scope, receive, send)
            return task

        tee = BodyTee(self.config.max_body_bytes)
        view = ASGIRequestView(scope, tee)
        launched: list[asyncio.Task[CapturedBody | None]] = []

        async def receive_and_copy() -> Message:
            message = await receive()
            if message["type"] == "http.request" and not tee.finished:
                tee.feed(message.get("body", b""))
                if not message.get("more_body", False):
                    tee.finished = True
                    task = self._launch(view, span)
                    launched.append(task)
            return message

        await self.app(scope, receive_and_copy, send)
        return launched[0] if launched else None

    def _launch(
        self, view: ASGIRequestView, span: SpanHandle
    ) -> asyncio.Task[CapturedBody | None]:
        return spawn(capture_and_attach(view, span, self.config), name="bodytracer-capture")

    def _attach_metadata(self, scope: Scope, view: ASGIRequestView, span: SpanHandle) -> None:
        try:
            span.set_attributes(
                extract_request_metadata(view.headers, scope.get("client"), scope.get("scheme"))
            )
        except Exception:
            logger.debug("bodytracer: request metadata capture failed", exc_info=True)
