"""Exceptions raised by gofr-dotenv.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Usage:
    from gofr_dotenv.exceptions import (
        DotenvError,
        ParseError,
        MissingEnvVarsError,
    )

    try:
        config_sync(safe=True)
    except MissingEnvVarsError as e:
        print(e.missing)
"""

from gofr_dotenv.exceptions.base import (
    ConfigurationError,
    DotenvError,
    MissingEnvVarsError,
    ParseError,
    ValidationError,
)

__all__ = [
    "DotenvError",
    "ParseError",
    "ValidationError",
    "MissingEnvVarsError",
    "ConfigurationError",
]
