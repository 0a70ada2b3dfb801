from __future__ import annotations

import pytest

from bodytracer.core import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldSet, is_sensitive


def test_default_set_has_builtin_entries_lowercased() -> None:
    fields = SensitiveFieldSet.build()

    assert len(DEFAULT_SENSITIVE_FIELDS) == 19
    assert len(fields.entries) == 19
    assert "stripetoken" in fields.entries
    assert all(entry == entry.lower() for entry in fields.entries)


def test_extra_fields_follow_builtins_and_are_normalised() -> None:
    fields = SensitiveFieldSet.build([" OTP ", "", "Password", "iban"])

    assert fields.entries[:19] == SensitiveFieldSet.build().entries
    assert fields.entries[19:] == ("otp", "iban")


@pytest.mark.parametrize(
    "name",
    ["password", "PASSWORD", "userPassword", "x-api_key", "access_token", "card_number", "ssn"],
)
def test_sensitive_names_match_by_substring(name: str) -> None:
    assert is_sensitive(name, SensitiveFieldSet.build())


@pytest.mark.parametrize("name", ["username", "email", "amount", ""])
def test_plain_names_do_not_match(name: str) -> None:
    assert not is_sensitive(name, SensitiveFieldSet.build())


def test_substring_matching_over_matches_related_words() -> None:
    fields = SensitiveFieldSet.build()

    assert is_sensitive("author", fields)
    assert is_sensitive("shipping_address", fields)


def test_empty_entries_never_match_everything() -> None:
    fields = SensitiveFieldSet(entries=["", "  "])

    assert fields.entries == ()
    assert not is_sensitive("anything", fields)


def test_comma_separated_string_is_split() -> None:
    fields = SensitiveFieldSet(entries="otp, iban")

    assert fields.entries == ("otp", "iban")


def test_non_string_names_are_handled() -> None:
    assert not is_sensitive(42, SensitiveFieldSet.build())  # type: ignore[arg-type]
