"""Loader options.

Options are resolved once per load and never mutated afterwards. They can be
built explicitly, from a plain mapping (``ConfigOptions.coerce``) or from
environment variables:

    {prefix}_PATH                 primary source (default: .env)
    {prefix}_EXPORT               export into the process environment
    {prefix}_SAFE                 validate against the example source
    {prefix}_EXAMPLE              example source (default: .env.example)
    {prefix}_ALLOW_EMPTY_VALUES   empty values satisfy safe mode
    {prefix}_DEFAULTS             defaults source; empty disables it
    {prefix}_SEARCH_PARENTS       look for sources in parent directories
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from gofr_dotenv.exceptions import ConfigurationError

DEFAULT_PATH = ".env"
DEFAULT_EXAMPLE = ".env.example"
DEFAULT_DEFAULTS = ".env.defaults"
DEFAULT_ENV_PREFIX = "DOTENV"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: Optional[str], name: str, default: bool) -> bool:
    """Convert an optional string flag to bool, raising a clear error when invalid."""
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean (true/false), got {value!r}",
        details={"name": name, "value": value},
    )


@dataclass(frozen=True)
class ConfigOptions:
    """Options for a single load.

    Attributes:
        path: Primary source
        export: Publish loaded values into the environment (existing
            variables are never overwritten)
        safe: Require every key of the example source to be available
        example: Example source listing required keys, read only when safe
        allow_empty_values: Count empty values as present in safe mode
        defaults: Lower-precedence source; None or "" disables it
        search_parents: Look for relative sources in parent directories
            when they are not in the working directory
    """

    path: str = DEFAULT_PATH
    export: bool = False
    safe: bool = False
    example: str = DEFAULT_EXAMPLE
    allow_empty_values: bool = False
    defaults: Optional[str] = DEFAULT_DEFAULTS
    search_parents: bool = False

    def __post_init__(self) -> None:
        # Frozen: normalise path-like values through object.__setattr__
        for name in ("path", "example", "defaults"):
            value = getattr(self, name)
            if isinstance(value, os.PathLike):
                object.__setattr__(self, name, os.fspath(value))

        if not self.path:
            raise ConfigurationError("path must not be empty", details={"name": "path"})
        if self.safe and not self.example:
            raise ConfigurationError(
                "example must be set when safe mode is enabled", details={"name": "example"}
            )

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_ENV_PREFIX,
        env: Optional[Mapping[str, str]] = None,
    ) -> "ConfigOptions":
        """Build options from {prefix}_* environment variables.

        Args:
            prefix: Environment variable prefix
            env: Variables to read (default: os.environ)

        Raises:
            ConfigurationError: A boolean variable has an unrecognised value
        """
        source = os.environ if env is None else env

        defaults: Optional[str] = source.get(f"{prefix}_DEFAULTS", DEFAULT_DEFAULTS)
        if not defaults:
            defaults = None

        return cls(
            path=source.get(f"{prefix}_PATH") or DEFAULT_PATH,
            export=_parse_bool(source.get(f"{prefix}_EXPORT"), f"{prefix}_EXPORT", False),
            safe=_parse_bool(source.get(f"{prefix}_SAFE"), f"{prefix}_SAFE", False),
            example=source.get(f"{prefix}_EXAMPLE") or DEFAULT_EXAMPLE,
            allow_empty_values=_parse_bool(
                source.get(f"{prefix}_ALLOW_EMPTY_VALUES"), f"{prefix}_ALLOW_EMPTY_VALUES", False
            ),
            defaults=defaults,
            search_parents=_parse_bool(
                source.get(f"{prefix}_SEARCH_PARENTS"), f"{prefix}_SEARCH_PARENTS", False
            ),
        )

    @classmethod
    def coerce(
        cls,
        options: Union["ConfigOptions", Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> "ConfigOptions":
        """Turn whatever a caller passed into ConfigOptions.

        ``options`` may be an instance, a mapping of field names, or None for
        the defaults. Keyword overrides are applied last.
        """
        if options is None:
            resolved = cls()
        elif isinstance(options, cls):
            resolved = options
        else:
            resolved = cls(**_checked_fields(options))

        if overrides:
            resolved = resolved.replace(**overrides)
        return resolved

    def replace(self, **changes: Any) -> "ConfigOptions":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **_checked_fields(changes))


def _checked_fields(values: Mapping[str, Any]) -> Mapping[str, Any]:
    known = {field.name for field in dataclasses.fields(ConfigOptions)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown option(s): {', '.join(unknown)}",
            details={"unknown": unknown, "known": sorted(known)},
        )
    return values


__all__ = [
    "ConfigOptions",
    "DEFAULT_PATH",
    "DEFAULT_EXAMPLE",
    "DEFAULT_DEFAULTS",
    "DEFAULT_ENV_PREFIX",
]
