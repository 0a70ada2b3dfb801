"""Example 1: ASGI middleware.

A Starlette app whose login endpoint reads its own JSON body. The
middleware copies the body as the endpoint reads it and attaches the
redacted version to the server span started by ``ensure_span``.

Validates: the endpoint still sees the full body, the exported span
carries ``http.request.body`` with the password masked.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from bodytracer import BodyCaptureMiddleware, CaptureConfig


async def login(request: Request) -> JSONResponse:
    payload = await request.json()
    return JSONResponse({"welcome": payload["username"]})


def main() -> None:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)

    config = CaptureConfig(enabled=True, ensure_span=True)
    app = Starlette(
        routes=[Route("/login", login, methods=["POST"])],
        middleware=[Middleware(BodyCaptureMiddleware, config=config)],
    )

    with TestClient(app) as client:
        response = client.post("/login", json={"username": "john", "password": "secret123"})
        print(response.json())


if __name__ == "__main__":
    main()
