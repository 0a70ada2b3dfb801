"""Example 2: Handler wrapper.

Only selected endpoints capture their body. The wrapper launches capture
in the background and calls the handler straight away; ``await_capture``
holds the response until the span attribute is written.
"""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from bodytracer import CaptureConfig, capture_request_body

CONFIG = CaptureConfig(enabled=True, extra_sensitive_fields=("iban",))
tracer = trace.get_tracer("example")


@capture_request_body(config=CONFIG, await_capture=True)
async def _pay(request: Request) -> JSONResponse:
    payload = await request.json()
    return JSONResponse({"amount": payload["amount"]})


async def pay(request: Request) -> JSONResponse:
    with tracer.start_as_current_span("POST /pay"):
        return await _pay(request)


def main() -> None:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)

    app = Starlette(routes=[Route("/pay", pay, methods=["POST"])])
    with TestClient(app) as client:
        response = client.post("/pay", json={"amount": 42, "iban": "DE89370400440532013000"})
        print(response.json())


if __name__ == "__main__":
    main()
