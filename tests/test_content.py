from __future__ import annotations

import json

import pytest

from bodytracer.core import CaptureConfig, SensitiveFieldSet, check_size, classify, parse_body
from bodytracer.core.content import truncate_utf8
from bodytracer.models import ContentKind

FIELDS = SensitiveFieldSet.build()


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("application/json", ContentKind.JSON),
        ("Application/JSON; charset=utf-8", ContentKind.JSON),
        ("application/graphql", ContentKind.GRAPHQL),
        ("application/x-www-form-urlencoded", ContentKind.FORM),
        ("multipart/form-data; boundary=X", ContentKind.MULTIPART),
        ("text/plain", ContentKind.UNSUPPORTED),
        ("application/octet-stream", ContentKind.UNSUPPORTED),
        ("", ContentKind.UNSUPPORTED),
        (None, ContentKind.UNSUPPORTED),
    ],
)
def test_classify(header: str | None, expected: ContentKind) -> None:
    assert classify(header) == expected


def test_check_size_is_inclusive_of_the_budget() -> None:
    config = CaptureConfig(max_body_bytes=10)

    assert check_size(10, config)
    assert not check_size(11, config)


def test_parse_json_redacts_and_serialises_compactly() -> None:
    parsed = parse_body(ContentKind.JSON, b'{"username": "john", "password": "secret123"}', FIELDS)

    assert parsed.text == '{"username":"john","password":"[REDACTED]"}'
    assert not parsed.parse_error


def test_parse_json_keeps_non_ascii_text() -> None:
    parsed = parse_body(ContentKind.JSON, '{"name": "Zoë"}'.encode(), FIELDS)

    assert parsed.text == '{"name":"Zoë"}'


def test_parse_json_failure_falls_back_to_masked_preview() -> None:
    parsed = parse_body(ContentKind.JSON, b'{"broken": "json", "token": "abc"', FIELDS)

    assert parsed.parse_error
    assert parsed.text == '{"broken": "json", "token": "[REDACTED]"'


def test_parse_json_failure_preview_is_bounded() -> None:
    parsed = parse_body(ContentKind.JSON, b"not json " * 500, FIELDS, preview_limit=50)

    assert parsed.parse_error
    assert len(parsed.text) == 50


def test_parse_json_redacts_embedded_graphql_query() -> None:
    body = json.dumps(
        {
            "query": 'mutation { login(user: "bob", password: "x") { id } }',
            "variables": {"password": "y"},
        }
    ).encode()

    parsed = json.loads(parse_body(ContentKind.JSON, body, FIELDS).text)
    untouched = json.loads(
        parse_body(ContentKind.JSON, body, FIELDS, redact_embedded_graphql=False).text
    )

    assert parsed["query"] == 'mutation { login(user: "bob", password: "[REDACTED]") { id } }'
    assert parsed["variables"] == {"password": "[REDACTED]"}
    assert untouched["query"] == 'mutation { login(user: "bob", password: "x") { id } }'


def test_parse_graphql_uses_text_redaction() -> None:
    body = b'mutation Login { login(username: "john", password: "secret123") { token } }'

    parsed = parse_body(ContentKind.GRAPHQL, body, FIELDS)

    assert parsed.text == (
        'mutation Login { login(username: "john", password: "[REDACTED]") { token } }'
    )


def test_parse_form_decodes_flat_mapping() -> None:
    parsed = parse_body(ContentKind.FORM, b"username=john&password=secret123", FIELDS)

    assert parsed.text == '{"username":"john","password":"[REDACTED]"}'


def test_parse_form_decodes_percent_encoding_and_blank_values() -> None:
    parsed = parse_body(ContentKind.FORM, b"q=hello+world%21&empty=&pin=1", FIELDS)

    assert json.loads(parsed.text) == {"q": "hello world!", "empty": "", "pin": "[REDACTED]"}


def test_parse_form_repeated_keys_keep_last_value() -> None:
    parsed = parse_body(ContentKind.FORM, b"tag=a&tag=b", FIELDS)

    assert json.loads(parsed.text) == {"tag": "b"}


@pytest.mark.parametrize("kind", [ContentKind.MULTIPART, ContentKind.UNSUPPORTED])
def test_parse_rejects_kinds_that_are_never_read(kind: ContentKind) -> None:
    with pytest.raises(ValueError, match="not parseable"):
        parse_body(kind, b"data", FIELDS)


def test_truncate_utf8_never_splits_characters() -> None:
    assert truncate_utf8("abc", 10) == "abc"
    assert truncate_utf8("abcdef", 3) == "abc"
    assert truncate_utf8("éé", 3) == "é"
