"""Base exception classes for gofr-dotenv.

All gofr-dotenv exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Read failures other than "file not found" are not wrapped: the original
OSError reaches the caller unchanged.
"""

from typing import Any, Dict, Iterable, List, Optional


class DotenvError(Exception):
    """Base exception for all gofr-dotenv errors.

    Attributes:
        code: Machine-readable error code (e.g., "MALFORMED_LINE")
        message: Human-readable error message
        details: Optional additional context for debugging/recovery
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization.

        Returns:
            Dictionary with code, message, and details keys.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ParseError(DotenvError):
    """Raised when a line looks like an assignment but cannot be split into key and value."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(
            code="MALFORMED_LINE",
            message=f"Malformed line {line_number}: {line!r}",
            details={"line_number": line_number, "line": line},
        )


class ValidationError(DotenvError):
    """Base for validation errors raised after sources were parsed."""

    pass


class MissingEnvVarsError(ValidationError):
    """Safe mode found keys in the example file that the environment does not provide.

    The ``missing`` attribute holds the sorted key names so callers can
    report them without parsing the message.
    """

    def __init__(
        self,
        missing: Iterable[str],
        example: Optional[str] = None,
        allow_empty_values: bool = False,
    ):
        self.missing: List[str] = sorted(missing)

        parts = [
            "The following variables were defined in the example file but are not "
            f"present in the environment:\n  {', '.join(self.missing)}",
            "Make sure to add them to your env file.",
        ]
        if not allow_empty_values:
            parts.append(
                "If you expect any of these variables to be empty, you can set the "
                "allow_empty_values option to true."
            )

        details: Dict[str, Any] = {"missing": list(self.missing)}
        if example is not None:
            details["example"] = example

        super().__init__(code="MISSING_ENV_VARS", message="\n\n".join(parts), details=details)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(DotenvError):
    """Raised when loader options are invalid.

    The message can be passed as the first positional argument, like a
    plain exception: ``raise ConfigurationError("bad value")``.
    """

    def __init__(
        self, message: str, code: str = "INVALID_OPTION", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, details=details)
