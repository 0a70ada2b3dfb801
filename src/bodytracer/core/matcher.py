"""Sensitive field-name matching."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_SENSITIVE_FIELDS: tuple[str, ...] = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "apikey",
    "access_token",
    "auth",
    "credentials",
    "mysql_pwd",
    "stripeToken",
    "card",
    "cardnumber",
    "ccv",
    "cvc",
    "cvv",
    "ssn",
    "pin",
)


class SensitiveFieldSet(BaseModel):
    """Ordered, lowercase set of field-name substrings treated as sensitive.

    Entries are normalised at construction: stripped, lowercased, with empty
    strings and duplicates dropped. An empty entry would match every name.
    """

    model_config = ConfigDict(frozen=True)

    entries: tuple[str, ...] = ()

    @field_validator("entries", mode="before")
    @classmethod
    def _normalise(cls, value: Iterable[str]) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split(",")
        seen: dict[str, None] = {}
        for raw in value:
            entry = str(raw).strip().lower()
            if entry:
                seen.setdefault(entry, None)
        return tuple(seen)

    @classmethod
    def build(cls, extra: Iterable[str] = ()) -> SensitiveFieldSet:
        """Built-in entries followed by ``extra``."""
        return cls(entries=(*DEFAULT_SENSITIVE_FIELDS, *extra))

    def matches(self, field_name: str) -> bool:
        lowered = str(field_name).lower()
        return any(entry in lowered for entry in self.entries)


def is_sensitive(field_name: str, fields: SensitiveFieldSet) -> bool:
    return fields.matches(field_name)
