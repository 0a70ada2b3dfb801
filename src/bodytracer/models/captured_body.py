"""Captured body model and related enumerations."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

BODY_ATTRIBUTE = "http.request.body"
BODY_TYPE_ATTRIBUTE = "http.request.body.type"
BODY_SIZE_ATTRIBUTE = "http.request.body.size"
BODY_PARSE_ERROR_ATTRIBUTE = "http.request.body.parse_error"

MULTIPART_PLACEHOLDER = "[MULTIPART - NOT CAPTURED]"

AttributeValue = str | int | float | bool


class ContentKind(StrEnum):
    JSON = "json"
    GRAPHQL = "graphql"
    FORM = "form"
    MULTIPART = "multipart"
    UNSUPPORTED = "unsupported"


class CaptureReason(StrEnum):
    TOO_LARGE = "too large"
    PARSE_ERROR = "parse error"
    UNSUPPORTED_TYPE = "unsupported type"
    STREAM_UNAVAILABLE = "stream unavailable"
    TIMEOUT = "timeout"


def too_large_placeholder(size: int) -> str:
    return f"[TOO LARGE: {size} bytes]"


class BodySnapshot(BaseModel):
    """Duplicated request body: the bytes kept plus the size seen on the wire.

    ``data`` may hold only the leading part of the body when the reader
    stopped buffering past the capture budget; ``total_size`` always counts
    every byte.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes = b""
    total_size: int = Field(default=0, ge=0)

    @classmethod
    def of(cls, data: bytes) -> BodySnapshot:
        return cls(data=data, total_size=len(data))

    @property
    def complete(self) -> bool:
        return len(self.data) == self.total_size


class CapturedBody(BaseModel):
    """Outcome of capturing one request body. Lives only as long as its span."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    captured: bool
    body: str | None = None
    content_kind: ContentKind | None = None
    original_byte_size: int | None = None
    reason: CaptureReason | None = None
    parse_error: bool = False

    @model_validator(mode="after")
    def _check_consistency(self) -> CapturedBody:
        if self.content_kind == ContentKind.MULTIPART and self.captured:
            raise ValueError("multipart bodies are never captured")
        return self

    def to_span_attributes(self) -> dict[str, AttributeValue]:
        """Flatten into the ``http.request.body*`` attribute schema.

        Results that carry nothing worth showing (stream failures) produce an
        empty mapping so no attribute is written.
        """
        if self.captured:
            attributes: dict[str, AttributeValue] = {BODY_ATTRIBUTE: self.body or ""}
            if self.content_kind is not None:
                attributes[BODY_TYPE_ATTRIBUTE] = self.content_kind.value
            if self.original_byte_size is not None:
                attributes[BODY_SIZE_ATTRIBUTE] = self.original_byte_size
            if self.parse_error:
                attributes[BODY_PARSE_ERROR_ATTRIBUTE] = True
            return attributes

        if self.content_kind == ContentKind.MULTIPART:
            return {
                BODY_ATTRIBUTE: MULTIPART_PLACEHOLDER,
                BODY_TYPE_ATTRIBUTE: ContentKind.MULTIPART.value,
            }
        if self.reason == CaptureReason.TOO_LARGE and self.original_byte_size is not None:
            return {
                BODY_ATTRIBUTE: too_large_placeholder(self.original_byte_size),
                BODY_SIZE_ATTRIBUTE: self.original_byte_size,
            }
        return {}
