"""Configuration for request-body capture."""

from __future__ import annotations

import os
import warnings
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .matcher import SensitiveFieldSet

DEFAULT_MAX_BODY_BYTES = 10240
DEFAULT_CAPTURE_TIMEOUT = 5.0

ENV_CAPTURE_BODY = "BODYTRACER_CAPTURE_BODY"
ENV_MAX_BODY_SIZE = "BODYTRACER_MAX_BODY_SIZE"
ENV_SENSITIVE_FIELDS = "BODYTRACER_SENSITIVE_FIELDS"
ENV_CAPTURE_METADATA = "BODYTRACER_CAPTURE_METADATA"
ENV_CAPTURE_TIMEOUT = "BODYTRACER_CAPTURE_TIMEOUT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class CaptureConfig(BaseModel):
    """Immutable capture settings. Built once at startup and passed via DI."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    max_body_bytes: int = Field(default=DEFAULT_MAX_BODY_BYTES, gt=0)
    extra_sensitive_fields: tuple[str, ...] = ()
    capture_metadata: bool = True
    capture_timeout: float = Field(default=DEFAULT_CAPTURE_TIMEOUT, gt=0)
    redact_embedded_graphql: bool = True
    ensure_span: bool = False

    _sensitive_fields: SensitiveFieldSet = PrivateAttr()

    @field_validator("extra_sensitive_fields", mode="before")
    @classmethod
    def _split_fields(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    def model_post_init(self, __context: object) -> None:
        self._sensitive_fields = SensitiveFieldSet.build(self.extra_sensitive_fields)

    @property
    def sensitive_fields(self) -> SensitiveFieldSet:
        return self._sensitive_fields

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CaptureConfig:
        """Read ``BODYTRACER_*`` variables. Unparseable numbers fall back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            enabled=_env_flag(env, ENV_CAPTURE_BODY, default=False),
            max_body_bytes=_env_number(env, ENV_MAX_BODY_SIZE, int, DEFAULT_MAX_BODY_BYTES),
            extra_sensitive_fields=env.get(ENV_SENSITIVE_FIELDS, ""),
            capture_metadata=_env_flag(env, ENV_CAPTURE_METADATA, default=True),
            capture_timeout=_env_number(env, ENV_CAPTURE_TIMEOUT, float, DEFAULT_CAPTURE_TIMEOUT),
        )


def _env_flag(env: Mapping[str, str], name: str, *, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_number(
    env: Mapping[str, str], name: str, kind: type[int] | type[float], default: int | float
) -> int | float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = kind(raw.strip())
    except ValueError:
        value = None
    if value is None or value <= 0:
        warnings.warn(
            f"bodytracer: ignoring invalid {name}={raw!r}, using {default}",
            stacklevel=3,
        )
        return default
    return value
