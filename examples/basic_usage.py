"""Basic usage: redact bodies offline and inspect the span attributes."""

from __future__ import annotations

from bodytracer import CaptureConfig
from bodytracer.core import build_captured_body, classify
from bodytracer.models import BodySnapshot
from bodytracer.renderers import render_capture


def main() -> None:
    config = CaptureConfig(enabled=True, extra_sensitive_fields=("otp",))

    samples = [
        ("application/json", b'{"username":"john","password":"secret123","otp":"123456"}'),
        ("application/x-www-form-urlencoded", b"username=john&password=secret123"),
        (
            "application/graphql",
            b'mutation Login { login(username: "john", password: "secret123") { token } }',
        ),
        ("application/json", b'{"broken": "json", "token": "abc"'),
    ]
    for content_type, body in samples:
        result = build_captured_body(classify(content_type), BodySnapshot.of(body), config)
        print(render_capture(result))


if __name__ == "__main__":
    main()
