"""Rich-based console rendering of capture results."""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.tree import Tree

from ..core.capture_config import CaptureConfig
from ..models import CapturedBody

_MAX_VALUE_LEN = 400


def render_capture(
    result: CapturedBody | None, *, skipped: str = "unsupported content type"
) -> str:
    if result is None:
        return _export(Tree(f"Capture: skipped ({skipped})"))

    tree = Tree(_capture_label(result))
    attributes = result.to_span_attributes()
    if not attributes:
        tree.add("(no span attributes written)")
    for key, value in attributes.items():
        tree.add(f"{key} = {_format_value(value)}")
    return _export(tree)


def render_config(config: CaptureConfig) -> str:
    tree = Tree("Capture configuration")
    tree.add(f"enabled: {config.enabled}")
    tree.add(f"max_body_bytes: {config.max_body_bytes}")
    tree.add(f"capture_metadata: {config.capture_metadata}")
    tree.add(f"capture_timeout: {config.capture_timeout}s")
    tree.add(f"redact_embedded_graphql: {config.redact_embedded_graphql}")
    tree.add(f"ensure_span: {config.ensure_span}")
    fields = tree.add(f"sensitive fields ({len(config.sensitive_fields.entries)})")
    for entry in config.sensitive_fields.entries:
        fields.add(entry)
    return _export(tree)


def _capture_label(result: CapturedBody) -> str:
    kind = result.content_kind.value if result.content_kind is not None else "unknown"
    size = "size unknown"
    if result.original_byte_size is not None:
        size = f"{result.original_byte_size} bytes"
    if result.captured:
        state = "captured ✓"
    else:
        state = f"not captured ✗ ({result.reason.value if result.reason else 'unknown'})"
    return f"Capture: {kind}, {size}, {state}"


def _format_value(value: object) -> str:
    text = repr(value) if not isinstance(value, str) else value
    if len(text) <= _MAX_VALUE_LEN:
        return text
    return text[:_MAX_VALUE_LEN] + "... [truncated]"


def _export(tree: Tree) -> str:
    console = Console(record=True, width=120, markup=False, file=StringIO())
    console.print(tree)
    return console.export_text()
