"""Host framework integrations."""

from .asgi import ASGIRequestView, BodyCaptureMiddleware, BodyTee
from .starlette import StarletteRequestView, capture_request_body, start_capture

__all__ = [
    "ASGIRequestView",
    "BodyCaptureMiddleware",
    "BodyTee",
    "StarletteRequestView",
    "capture_request_body",
    "start_capture",
]
