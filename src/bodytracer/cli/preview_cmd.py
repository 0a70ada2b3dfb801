"""Preview and config subcommand implementations."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from pydantic import ValidationError

from ..core.capture_config import CaptureConfig
from ..core.content import classify
from ..core.orchestrator import ELIGIBLE_METHODS, build_captured_body
from ..models import BodySnapshot, CapturedBody, ContentKind
from ..renderers import render_capture, render_config


def run_preview(
    body_file: Path,
    content_type: str,
    *,
    method: str = "POST",
    max_body_size: int | None,
    extra_fields: list[str],
    as_json: bool,
) -> int:
    base = CaptureConfig.from_env()
    try:
        config = CaptureConfig(
            enabled=True,
            max_body_bytes=max_body_size if max_body_size is not None else base.max_body_bytes,
            extra_sensitive_fields=(*base.extra_sensitive_fields, *extra_fields),
            redact_embedded_graphql=base.redact_embedded_graphql,
        )
    except ValidationError as exc:
        print(f"Error: invalid option: {exc}", file=sys.stderr)
        return 1

    try:
        data = body_file.read_bytes()
    except FileNotFoundError:
        print(f"Error: file not found: {body_file}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error reading file: {exc}", file=sys.stderr)
        return 1

    kind = classify(content_type)
    result: CapturedBody | None = None
    skipped = "unsupported content type"
    if method.upper() not in ELIGIBLE_METHODS:
        skipped = f"{method.upper()} requests are not captured"
    elif kind != ContentKind.UNSUPPORTED:
        snapshot = None if kind == ContentKind.MULTIPART else BodySnapshot.of(data)
        result = build_captured_body(kind, snapshot, config)

    if as_json:
        attributes = result.to_span_attributes() if result is not None else {}
        print(json.dumps(attributes, ensure_ascii=False, sort_keys=True))
        return 0

    print(render_capture(result, skipped=skipped))
    return 0


def run_config() -> int:
    print(render_config(CaptureConfig.from_env()))
    return 0
