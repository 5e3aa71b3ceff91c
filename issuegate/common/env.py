"""Environment variable parsing shared by the ``from_env`` constructors."""

from __future__ import annotations

import os

import httpx


class ConfigError(ValueError):
    """Raised when an environment variable is missing or invalid."""

    @classmethod
    def missing(cls, name: str) -> ConfigError:
        """Return an error for a required variable that is unset or blank."""
        return cls(f"{name} environment variable is required")

    @classmethod
    def invalid(cls, name: str, value: str, constraint: str) -> ConfigError:
        """Return an error for a variable whose value fails validation."""
        return cls(f"Invalid {name} {value!r}. {constraint}")


def require_env(name: str) -> str:
    """Return the stripped value of ``name``.

    Raises
    ------
    ConfigError
        If the variable is unset or blank.

    """
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigError.missing(name)
    return value


def env_float(name: str, default: float) -> float:
    """Return ``name`` parsed as a positive float, or ``default`` when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError.invalid(name, raw, "Must be a positive number") from exc
    if not value > 0:
        raise ConfigError.invalid(name, raw, "Must be a positive number")
    return value


def env_int(name: str, default: int) -> int:
    """Return ``name`` parsed as a positive integer, or ``default`` when unset."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError.invalid(name, raw, "Must be a positive integer") from exc
    if value <= 0:
        raise ConfigError.invalid(name, raw, "Must be a positive integer")
    return value


def env_url(name: str, default: str | None = None) -> str:
    """Return ``name`` as an absolute ``http``/``https`` URL.

    The variable is required when ``default`` is ``None``. Values are parsed
    with :class:`httpx.URL` so a URL the clients cannot request fails here
    instead of on the first Slack interaction.

    Raises
    ------
    ConfigError
        If a required variable is unset, or the value is not a valid
        ``http``/``https`` URL with a host.

    """
    if default is None:
        raw = require_env(name)
    else:
        raw = os.environ.get(name, default).strip()
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ConfigError.invalid(name, raw, "Must be an http(s) URL") from exc
    if url.scheme not in {"http", "https"} or not url.host:
        raise ConfigError.invalid(name, raw, "Must be an http(s) URL")
    return raw
