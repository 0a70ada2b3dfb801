"""bodytracer: redacted HTTP request-body capture for OpenTelemetry spans.

Convenience API (delegates to a default CaptureConfig):
    bodytracer.configure(...)   -> set the default capture configuration
    bodytracer.get_config()     -> default config, read from the environment once

DI API (construct your own config):
    from bodytracer import BodyCaptureMiddleware, CaptureConfig
    app = BodyCaptureMiddleware(app, config=CaptureConfig(enabled=True))
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from .core import (
    REDACTION_MARKER,
    CaptureConfig,
    SensitiveFieldSet,
    capture_and_attach,
    redact,
    redact_query_text,
)
from .exceptions import BodytracerConfigError
from .integrations import BodyCaptureMiddleware, capture_request_body
from .models import CapturedBody, ContentKind

_default_config: CaptureConfig | None = None


def configure(
    *,
    enabled: bool = True,
    max_body_bytes: int = 10240,
    extra_sensitive_fields: Iterable[str] | None = None,
    capture_metadata: bool = True,
    capture_timeout: float = 5.0,
    redact_embedded_graphql: bool = True,
    ensure_span: bool = False,
) -> CaptureConfig:
    """Configure and return the default CaptureConfig.

    Raises ``BodytracerConfigError`` for invalid values.
    """
    global _default_config
    try:
        config = CaptureConfig(
            enabled=enabled,
            max_body_bytes=max_body_bytes,
            extra_sensitive_fields=tuple(extra_sensitive_fields or ()),
            capture_metadata=capture_metadata,
            capture_timeout=capture_timeout,
            redact_embedded_graphql=redact_embedded_graphql,
            ensure_span=ensure_span,
        )
    except ValidationError as exc:
        raise BodytracerConfigError(f"Invalid capture configuration: {exc}") from exc
    _default_config = config
    return config


def get_config() -> CaptureConfig:
    """Return the default config, reading ``BODYTRACER_*`` variables on first use."""
    global _default_config
    if _default_config is None:
        _default_config = CaptureConfig.from_env()
    return _default_config


def _reset_default_config() -> None:
    """Reset the default config. Used by test fixtures."""
    global _default_config
    _default_config = None


__all__ = [
    "REDACTION_MARKER",
    "BodyCaptureMiddleware",
    "CaptureConfig",
    "CapturedBody",
    "ContentKind",
    "SensitiveFieldSet",
    "capture_and_attach",
    "capture_request_body",
    "configure",
    "get_config",
    "redact",
    "redact_query_text",
]
