"""Handler wrapper that captures the body of Starlette/FastAPI requests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from typing import ParamSpec, TypeVar, overload

from starlette.requests import ClientDisconnect, Request

from ..core.background import spawn
from ..core.capture_config import CaptureConfig
from ..core.content import PARSEABLE_KINDS, classify
from ..core.orchestrator import capture_and_attach, is_eligible
from ..core.spans import get_active_span
from ..exceptions import BodyReadError
from ..models import BodySnapshot, CapturedBody, ContentKind

P = ParamSpec("P")
R = TypeVar("R")


class StarletteRequestView:
    """``RequestLike`` backed by Starlette's cached ``Request.body()``.

    Starlette keeps the body on the request after the first full read, and
    every later ``body()``, ``json()``, ``form()`` or ``stream()`` call is
    served from that cache. A declared ``Content-Length`` above ``limit`` is
    reported without touching the stream. Without a declared length the
    body is never buffered and reads as unavailable.
    """

    def __init__(self, request: Request, limit: int) -> None:
        self._request = request
        self._limit = limit

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def headers(self) -> Mapping[str, str]:
        return self._request.headers

    def declared_length(self) -> int | None:
        raw = self._request.headers.get("content-length")
        if raw is None or not raw.strip().isdigit():
            return None
        return int(raw)

    async def read_body(self) -> BodySnapshot:
        declared = self.declared_length()
        if declared is None:
            raise BodyReadError("request declares no Content-Length")
        if declared > self._limit:
            return BodySnapshot(data=b"", total_size=declared)
        try:
            body = await self._request.body()
        except (ClientDisconnect, RuntimeError) as exc:
            raise BodyReadError(str(exc) or exc.__class__.__name__) from exc
        return BodySnapshot.of(body)


async def start_capture(
    request: Request,
    config: CaptureConfig,
) -> asyncio.Task[CapturedBody | None] | None:
    """Begin capturing ``request`` in the background; ``None`` when it is not eligible.

    Starlette's receive channel has a single reader, so the body cache is
    filled here before the handler runs; the handler's own read is then
    served from memory. Only parseable bodies whose declared
    ``Content-Length`` fits the budget are read.
    """
    span = get_active_span()
    if not is_eligible(request.method, span, config):
        return None
    kind = classify(request.headers.get("content-type"))
    if kind == ContentKind.UNSUPPORTED:
        return None

    view = StarletteRequestView(request, config.max_body_bytes)
    if kind in PARSEABLE_KINDS:
        declared = view.declared_length()
        if declared is not None and declared <= config.max_body_bytes:
            try:
                await request.body()
            except (ClientDisconnect, RuntimeError):
                return None
    return spawn(capture_and_attach(view, span, config), name="bodytracer-capture")


def _find_request(args: tuple[object, ...], kwargs: dict[str, object]) -> Request | None:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    return None


@overload
def capture_request_body(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]: ...


@overload
def capture_request_body(
    func: None = None,
    *,
    config: CaptureConfig | None = None,
    await_capture: bool = False,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]: ...


def capture_request_body(
    func: Callable[P, Awaitable[R]] | None = None,
    *,
    config: CaptureConfig | None = None,
    await_capture: bool = False,
) -> (
    Callable[P, Awaitable[R]]
    | Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]
):
    """Capture the body of the ``Request`` passed to an async endpoint.

    Usable bare (``@capture_request_body``) or with options. The first
    ``Request`` found among the endpoint's arguments is captured; endpoints
    without one run unchanged. With ``await_capture`` the wrapper waits for
    the capture to finish after the handler returns, before handing back
    its response.
    """

    def decorator(handler: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        resolved = config
        if resolved is None:
            from .. import get_config

            resolved = get_config()

        @wraps(handler)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            request = _find_request(args, kwargs)
            task = await start_capture(request, resolved) if request is not None else None
            response = await handler(*args, **kwargs)
            if await_capture and task is not None:
                await asyncio.wait({task}, timeout=resolved.capture_timeout)
            return response

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
