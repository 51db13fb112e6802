"""gofr-dotenv - .env configuration loading for GOFR projects.

This package provides:
- parser: .env text to key/value mapping (and back)
- loader: primary/defaults/example source resolution, safe mode, export
- options: typed loader options, configurable from DOTENV_* variables
- exceptions: structured errors (parse failures, missing variables)
- logger: structured logging with JSON support
"""

__version__ = "1.0.0"

from gofr_dotenv.environment import (
    Environment,
    MemoryEnvironment,
    OsEnvironment,
)

from gofr_dotenv.exceptions import (
    DotenvError,
    ParseError,
    ValidationError,
    MissingEnvVarsError,
    ConfigurationError,
)

from gofr_dotenv.loader import (
    DotenvLoader,
    config,
    config_sync,
)

from gofr_dotenv.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

from gofr_dotenv.options import ConfigOptions

from gofr_dotenv.parser import parse, stringify

from gofr_dotenv.sources import (
    FileSourceReader,
    MemorySourceReader,
    SourceReader,
)

__all__ = [
    "__version__",
    # Parsing
    "parse",
    "stringify",
    # Loading
    "ConfigOptions",
    "DotenvLoader",
    "config",
    "config_sync",
    # Collaborators
    "SourceReader",
    "FileSourceReader",
    "MemorySourceReader",
    "Environment",
    "OsEnvironment",
    "MemoryEnvironment",
    # Exceptions
    "DotenvError",
    "ParseError",
    "ValidationError",
    "MissingEnvVarsError",
    "ConfigurationError",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
]
