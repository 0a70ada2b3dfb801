"""Content-type classification, size guarding and body parsing."""

from __future__ import annotations

import json
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict

from ..models import ContentKind
from .capture_config import CaptureConfig
from .matcher import SensitiveFieldSet
from .redaction import redact, redact_query_text

PARSE_ERROR_PREVIEW_CHARS = 1000

_CONTENT_TYPE_RULES: tuple[tuple[str, ContentKind], ...] = (
    ("application/json", ContentKind.JSON),
    ("application/graphql", ContentKind.GRAPHQL),
    ("application/x-www-form-urlencoded", ContentKind.FORM),
    ("multipart/form-data", ContentKind.MULTIPART),
)

PARSEABLE_KINDS = frozenset({ContentKind.JSON, ContentKind.GRAPHQL, ContentKind.FORM})


class ParsedBody(BaseModel):
    """Redacted, serialised body ready for attachment."""

    model_config = ConfigDict(frozen=True)

    text: str
    parse_error: bool = False


def classify(content_type: str | None) -> ContentKind:
    if not content_type:
        return ContentKind.UNSUPPORTED
    lowered = content_type.lower()
    for needle, kind in _CONTENT_TYPE_RULES:
        if needle in lowered:
            return kind
    return ContentKind.UNSUPPORTED


def check_size(byte_length: int, config: CaptureConfig) -> bool:
    return byte_length <= config.max_body_bytes


def serialize(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def truncate_utf8(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` UTF-8 bytes without splitting a character."""
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode("utf-8", errors="ignore")


def parse_body(
    kind: ContentKind,
    data: bytes,
    fields: SensitiveFieldSet,
    *,
    preview_limit: int = PARSE_ERROR_PREVIEW_CHARS,
    redact_embedded_graphql: bool = True,
) -> ParsedBody:
    """Parse and redact ``data`` for a parseable ``kind``.

    Malformed JSON does not fail: the leading ``preview_limit`` characters of
    the raw text are kept, masked textually, and flagged with ``parse_error``.

    ``kind`` must be one of ``PARSEABLE_KINDS``. Any other kind is a caller
    error and raises ``ValueError``; the orchestrator settles multipart and
    unsupported bodies before parsing.
    """
    if kind not in PARSEABLE_KINDS:
        raise ValueError(f"content kind {kind.value!r} is not parseable")

    text = data.decode("utf-8", errors="replace")

    if kind == ContentKind.GRAPHQL:
        return ParsedBody(text=redact_query_text(text, fields))

    if kind == ContentKind.FORM:
        parsed_form = dict(parse_qsl(text, keep_blank_values=True))
        return ParsedBody(text=serialize(redact(parsed_form, fields)))

    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        preview = text[: min(PARSE_ERROR_PREVIEW_CHARS, preview_limit)]
        return ParsedBody(text=redact_query_text(preview, fields), parse_error=True)

    redacted = redact(parsed, fields)
    if redact_embedded_graphql and isinstance(redacted, dict):
        query = redacted.get("query")
        if isinstance(query, str):
            redacted["query"] = redact_query_text(query, fields)
    return ParsedBody(text=serialize(redacted))
