"""Public data models."""

from .captured_body import (
    BODY_ATTRIBUTE,
    BODY_PARSE_ERROR_ATTRIBUTE,
    BODY_SIZE_ATTRIBUTE,
    BODY_TYPE_ATTRIBUTE,
    MULTIPART_PLACEHOLDER,
    AttributeValue,
    BodySnapshot,
    CapturedBody,
    CaptureReason,
    ContentKind,
    too_large_placeholder,
)

__all__ = [
    "BODY_ATTRIBUTE",
    "BODY_PARSE_ERROR_ATTRIBUTE",
    "BODY_SIZE_ATTRIBUTE",
    "BODY_TYPE_ATTRIBUTE",
    "MULTIPART_PLACEHOLDER",
    "AttributeValue",
    "BodySnapshot",
    "CaptureReason",
    "CapturedBody",
    "ContentKind",
    "too_large_placeholder",
]
