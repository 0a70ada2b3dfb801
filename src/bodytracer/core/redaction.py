"""Structural and text-pattern redaction of captured request bodies."""

from __future__ import annotations

import re
from functools import lru_cache

from .matcher import SensitiveFieldSet

REDACTION_MARKER = "[REDACTED]"
MAX_REDACTION_DEPTH = 50


def redact(
    value: object, fields: SensitiveFieldSet, *, max_depth: int = MAX_REDACTION_DEPTH
) -> object:
    """Return a copy of ``value`` with every sensitive member replaced by the marker.

    Mappings keep their keys and order, sequences keep their length. A member
    whose key is sensitive becomes ``REDACTION_MARKER`` whatever its type.
    Scalars are only ever redacted through their parent key, so a bare
    scalar inside a list passes through.

    Nesting deeper than ``max_depth`` is returned as-is: present but not
    redacted. The input is never mutated.
    """
    return _redact(value, fields, 0, max_depth)


def _redact(value: object, fields: SensitiveFieldSet, depth: int, max_depth: int) -> object:
    if depth >= max_depth:
        return value
    if isinstance(value, dict):
        result: dict[object, object] = {}
        for key, item in value.items():
            if fields.matches(key):
                result[key] = REDACTION_MARKER
            else:
                result[key] = _redact(item, fields, depth + 1, max_depth)
        return result
    if isinstance(value, list):
        return [_redact(item, fields, depth + 1, max_depth) for item in value]
    if isinstance(value, tuple):
        return tuple(_redact(item, fields, depth + 1, max_depth) for item in value)
    return value


@lru_cache(maxsize=256)
def _query_patterns(entry: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    name = re.escape(entry)
    # The value runs to the next unescaped copy of its own opening quote, or
    # to the end of a truncated preview.
    quoted = re.compile(
        "(" + name + r"""["']?\s*:\s*(["']))(?:\\.|(?!\2)[^\\])+(\2|$)""",
        re.IGNORECASE,
    )
    # Quoted values belong to the first pattern; skipping them here keeps
    # re-application stable.
    bare = re.compile("(" + name + r"""["']?\s*:\s*)(?!["'])[^\s,})]+""", re.IGNORECASE)
    return quoted, bare


def redact_query_text(text: str, fields: SensitiveFieldSet) -> str:
    """Mask ``field: "value"`` and ``field: value`` arguments in query-language text.

    Matching is textual and case-insensitive. It will miss values hidden in
    nested argument expressions and will mask any token that follows a
    matching name, even inside another string: ``note: "my pin: 42 here"``.
    An unterminated quoted value is masked to the end of the text.
    """
    if not isinstance(text, str) or not text:
        return text
    redacted = text
    for entry in fields.entries:
        quoted, bare = _query_patterns(entry)
        redacted = quoted.sub(rf"\g<1>{REDACTION_MARKER}\g<3>", redacted)
        redacted = bare.sub(rf"\g<1>{REDACTION_MARKER}", redacted)
    return redacted
