"""Load .env sources into a configuration mapping.

Sources are combined in this order of precedence (high -> low):
1) variables already defined in the environment (only relevant when exporting)
2) the primary source (``path``)
3) the defaults source (``defaults``)

Safe mode additionally requires every key listed in the example source to be
available, either from the sources or from the environment.

Usage:
    from gofr_dotenv import config, config_sync

    settings = config_sync(safe=True, export=True)
    settings = await config(path="service.env")
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional, Union

from gofr_dotenv.environment import Environment, OsEnvironment
from gofr_dotenv.exceptions import MissingEnvVarsError
from gofr_dotenv.logger import Logger, get_logger
from gofr_dotenv.options import ConfigOptions
from gofr_dotenv.parser import parse
from gofr_dotenv.sources import FileSourceReader, SourceReader

OptionsArg = Union[ConfigOptions, Mapping[str, Any], None]

# Shared default logger, created on first use
_default_logger: Optional[Logger] = None


def _get_default_logger() -> Logger:
    global _default_logger
    if _default_logger is None:
        _default_logger = get_logger()
    return _default_logger


class DotenvLoader:
    """Resolve .env sources through injectable collaborators.

    The loader holds no per-load state, so one instance can serve concurrent
    ``aload`` calls.

    Example:
        loader = DotenvLoader(
            reader=MemorySourceReader({".env": "FOO=bar\\n"}),
            environment=MemoryEnvironment(),
        )
        loader.load(export=True)
    """

    def __init__(
        self,
        reader: Optional[SourceReader] = None,
        environment: Optional[Environment] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.reader: SourceReader = reader or FileSourceReader()
        self.environment: Environment = environment or OsEnvironment()
        self.logger: Logger = logger or _get_default_logger()

    def load(self, options: OptionsArg = None, **overrides: Any) -> Dict[str, str]:
        """Load configuration, reading sources with blocking I/O.

        Args:
            options: ConfigOptions, a mapping of option names, or None
            **overrides: Option fields applied on top of ``options``

        Returns:
            Merged configuration read from the sources

        Raises:
            ParseError: A source contains a malformed line
            MissingEnvVarsError: Safe mode found required keys missing
            OSError: A source exists but could not be read
        """
        opts = ConfigOptions.coerce(options, **overrides)

        primary = self._read(opts, opts.path)
        defaults = self._read(opts, opts.defaults)
        example = self._read(opts, opts.example if opts.safe else None)

        return self._resolve(opts, primary, defaults, example)

    async def aload(self, options: OptionsArg = None, **overrides: Any) -> Dict[str, str]:
        """Load configuration without blocking the event loop.

        The sources are read concurrently; the result is the same as ``load``.
        """
        opts = ConfigOptions.coerce(options, **overrides)

        primary, defaults, example = await asyncio.gather(
            self._read_async(opts, opts.path),
            self._read_async(opts, opts.defaults),
            self._read_async(opts, opts.example if opts.safe else None),
        )

        return self._resolve(opts, primary, defaults, example)

    def _locate(self, opts: ConfigOptions, path: str) -> str:
        return self.reader.locate(path) if opts.search_parents else path

    def _read(self, opts: ConfigOptions, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        located = self._locate(opts, path)
        text = self.reader.read(located)
        if text is None:
            self.logger.debug("Source not found, treating as empty", path=located)
        return text

    async def _read_async(self, opts: ConfigOptions, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        located = self._locate(opts, path)
        text = await self.reader.read_async(located)
        if text is None:
            self.logger.debug("Source not found, treating as empty", path=located)
        return text

    def _parse(self, path: Optional[str], text: Optional[str]) -> Dict[str, str]:
        if text is None:
            return {}
        values = parse(text)
        self.logger.debug("Parsed source", path=path, keys=len(values))
        return values

    def _resolve(
        self,
        opts: ConfigOptions,
        primary_text: Optional[str],
        defaults_text: Optional[str],
        example_text: Optional[str],
    ) -> Dict[str, str]:
        conf = self._parse(opts.path, primary_text)

        if opts.defaults:
            conf_defaults = self._parse(opts.defaults, defaults_text)
            applied = [key for key in conf_defaults if key not in conf]
            for key in applied:
                conf[key] = conf_defaults[key]
            if applied:
                self.logger.debug("Applied defaults", path=opts.defaults, keys=",".join(applied))

        if opts.safe:
            conf_example = self._parse(opts.example, example_text)
            self._assert_safe(opts, conf, conf_example)

        if opts.export:
            self._export(conf)

        return conf

    def _assert_safe(
        self,
        opts: ConfigOptions,
        conf: Mapping[str, str],
        conf_example: Mapping[str, str],
    ) -> None:
        # Required keys may be supplied by the environment instead of a file
        available = {**conf, **self.environment.to_dict()}
        if not opts.allow_empty_values:
            available = {key: value for key, value in available.items() if value}

        missing = [key for key in conf_example if key not in available]
        if missing:
            self.logger.warning(
                "Required variables missing",
                example=opts.example,
                missing=",".join(sorted(missing)),
            )
            raise MissingEnvVarsError(
                missing, example=opts.example, allow_empty_values=opts.allow_empty_values
            )

    def _export(self, conf: Mapping[str, str]) -> None:
        exported = []
        for key, value in conf.items():
            if self.environment.get(key) is not None:
                continue
            self.environment.set(key, value)
            exported.append(key)
        self.logger.debug("Exported variables", count=len(exported), skipped=len(conf) - len(exported))


def config_sync(options: OptionsArg = None, **overrides: Any) -> Dict[str, str]:
    """Load configuration from files on disk into a mapping.

    See ``DotenvLoader.load``. Exporting writes to ``os.environ``.
    """
    return DotenvLoader().load(options, **overrides)


async def config(options: OptionsArg = None, **overrides: Any) -> Dict[str, str]:
    """Asynchronous variant of ``config_sync``."""
    return await DotenvLoader().aload(options, **overrides)


__all__ = ["DotenvLoader", "config", "config_sync"]
