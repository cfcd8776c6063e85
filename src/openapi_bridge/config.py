"""Bridge configuration — base URL, static headers, timeout, feature flags."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from openapi_bridge.errors import ConfigurationError

DEFAULT_REQUEST_TIMEOUT = 30.0

_TRUTHY = {"true", "yes", "1", "on"}


class BridgeConfig(BaseModel):
    """Immutable configuration shared by every component and every call.

    Built once before the registry and validated once. ``base_url`` may be
    left empty here and filled from the description's ``servers`` entry by
    :func:`~openapi_bridge.bootstrap.create_registry`.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    enable_tools: bool = True
    advertise_tools: bool = True
    additional_headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        return value.strip()

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            msg = "request_timeout must be positive"
            raise ValueError(msg)
        return value

    @property
    def tools_advertised(self) -> bool:
        """Whether the ``tools`` capability is announced during the handshake."""
        return self.enable_tools and self.advertise_tools

    def with_base_url(self, base_url: str) -> BridgeConfig:
        """Return a copy with *base_url* set."""
        return self.model_copy(update={"base_url": base_url.strip()})

    @classmethod
    def create(cls, **values: Any) -> BridgeConfig:
        """Validate *values*, raising :class:`ConfigurationError` on failure."""
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> BridgeConfig:
        """Build a config from environment variables.

        Recognized variables: ``API_BASE_URL``, ``ENABLE_TOOLS``,
        ``CAPABILITIES_TOOLS``, ``EXTRA_HEADERS`` (newline separated
        ``Name: value`` lines) and ``REQUEST_TIMEOUT``. Keyword *overrides*
        that are not ``None`` take precedence.
        """
        source = os.environ if env is None else env
        values: dict[str, Any] = {
            "base_url": source.get("API_BASE_URL", ""),
            "enable_tools": _env_bool(source.get("ENABLE_TOOLS"), default=True),
            "advertise_tools": _env_bool(source.get("CAPABILITIES_TOOLS"), default=True),
            "additional_headers": parse_header_lines(source.get("EXTRA_HEADERS", "")),
        }
        timeout = source.get("REQUEST_TIMEOUT")
        if timeout:
            try:
                values["request_timeout"] = float(timeout)
            except ValueError as exc:
                raise ConfigurationError(f"REQUEST_TIMEOUT is not a number: {timeout!r}") from exc

        for key, value in overrides.items():
            if value is None:
                continue
            if key == "additional_headers":
                values[key] = {**values["additional_headers"], **value}
            else:
                values[key] = value
        return cls.create(**values)


def parse_header_lines(text: str) -> dict[str, str]:
    """Parse ``Name: value`` lines into a header mapping.

    Blank lines are skipped. Lines without a colon, or with an empty name or
    value, are ignored the same way.
    """
    headers: dict[str, str] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key, value = key.strip(), value.strip()
        if key and value:
            headers[key] = value
    return headers


def _env_bool(raw: str | None, *, default: bool) -> bool:
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY
