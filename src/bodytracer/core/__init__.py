"""Capture engine: matching, redaction, parsing and orchestration."""

from .capture_config import CaptureConfig
from .content import ParsedBody, check_size, classify, parse_body
from .matcher import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldSet, is_sensitive
from .orchestrator import RequestLike, build_captured_body, capture_and_attach
from .redaction import REDACTION_MARKER, redact, redact_query_text
from .spans import SpanHandle, get_active_span

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "REDACTION_MARKER",
    "CaptureConfig",
    "ParsedBody",
    "RequestLike",
    "SensitiveFieldSet",
    "SpanHandle",
    "build_captured_body",
    "capture_and_attach",
    "check_size",
    "classify",
    "get_active_span",
    "is_sensitive",
    "parse_body",
    "redact",
    "redact_query_text",
]
