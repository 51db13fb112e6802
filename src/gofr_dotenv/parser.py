"""Parse and serialize .env text.

Parsing is line based and never touches files or the environment:

    >>> parse('FOO=bar\\nBAZ="qux\\\\nquux" # note\\n# comment')
    {'FOO': 'bar', 'BAZ': 'qux\\nquux'}

A line is only considered when it starts like an assignment (an identifier,
optionally indented, followed by ``=``). Everything else is skipped without
error, which is how comments and blank lines disappear.
"""

import re
from typing import Dict, Mapping

from gofr_dotenv.exceptions import ParseError

# Identifier may contain spaces ("export FOO=1"); the key is the last word.
_VARIABLE_START = re.compile(r"^\s*[a-zA-Z_][a-zA-Z_0-9 ]*\s*=")

_KEY_VALUE = re.compile(
    r"""
    \s*(?P<key>\S+?)\s*=\ *
    (?:
        (?P<quote>["'])(?P<quoted>.*)(?P=quote)
      | (?P<unquoted>[^#]*)
    )
    """,
    re.VERBOSE,
)

_BARE_KEY = re.compile(r"^[a-zA-Z_][a-zA-Z_0-9]*$")


def _expand_newlines(value: str) -> str:
    return value.replace("\\n", "\n")


def parse(text: str) -> Dict[str, str]:
    """Parse .env text into a key/value mapping.

    Args:
        text: Raw file content

    Returns:
        Mapping of key to string value. A key defined twice keeps the value
        of its last line.

    Raises:
        ParseError: A line starts like an assignment but no key/value pair
            can be extracted from it
    """
    env: Dict[str, str] = {}

    for line_number, line in enumerate(text.split("\n"), start=1):
        if not _VARIABLE_START.match(line):
            continue

        match = _KEY_VALUE.search(line)
        if match is None:
            raise ParseError(line_number, line)

        if match.group("quote") is not None:
            value = _expand_newlines(match.group("quoted"))
        else:
            value = match.group("unquoted").strip()

        env[match.group("key")] = value

    return env


def _needs_quotes(value: str) -> bool:
    return (
        value != value.strip()
        or "#" in value
        or "\n" in value
        or value[:1] in ("'", '"')
    )


def stringify(config: Mapping[str, str]) -> str:
    """Serialize a mapping to .env text that ``parse`` reads back.

    Values that would change when read back unquoted are written in double
    quotes with newlines escaped as ``\\n``.

    Raises:
        ValueError: A key is not a plain identifier
    """
    lines = []
    for key, value in config.items():
        if not _BARE_KEY.match(key):
            raise ValueError(f"Cannot serialize key {key!r}: not a valid variable name")
        if _needs_quotes(value):
            value = '"' + value.replace("\n", "\\n") + '"'
        lines.append(f"{key}={value}")

    return "".join(f"{line}\n" for line in lines)


__all__ = ["parse", "stringify"]
