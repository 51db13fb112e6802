"""Command line interface for gofr-dotenv.

USAGE:
    gofr-dotenv show  [source options] [--format env|json]
    gofr-dotenv check [source options]
    gofr-dotenv run   [source options] -- COMMAND [ARGS...]

SOURCE OPTIONS:
    --path FILE             Primary source (default: .env)
    --defaults FILE         Defaults source (default: .env.defaults)
    --no-defaults           Do not read a defaults source
    --example FILE          Example source for safe mode (default: .env.example)
    --safe                  Require every key of the example source
    --allow-empty-values    Empty values satisfy safe mode
    --search-parents        Look for sources in parent directories

Unset options fall back to the DOTENV_* environment variables, see
``ConfigOptions.from_env``.

EXAMPLES:
    # Print the merged configuration as JSON:
    gofr-dotenv show --format json

    # Fail a deployment step when required variables are missing:
    gofr-dotenv check --example .env.example

    # Start a process with the configuration exported:
    gofr-dotenv run --path prod.env -- python -m myservice
"""

import argparse
import json
import logging
import os
import subprocess
import sys
from typing import List, Optional

from gofr_dotenv.environment import MemoryEnvironment
from gofr_dotenv.exceptions import DotenvError, MissingEnvVarsError
from gofr_dotenv.loader import DotenvLoader
from gofr_dotenv.logger import create_logger
from gofr_dotenv.options import ConfigOptions
from gofr_dotenv.parser import stringify


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--path", help="Primary source. Default: .env")
    defaults_group = parser.add_mutually_exclusive_group()
    defaults_group.add_argument("--defaults", help="Defaults source. Default: .env.defaults")
    defaults_group.add_argument(
        "--no-defaults",
        action="store_true",
        help="Do not read a defaults source",
    )
    parser.add_argument("--example", help="Example source. Default: .env.example")
    parser.add_argument(
        "--safe",
        action="store_true",
        default=None,
        help="Require every key listed in the example source",
    )
    parser.add_argument(
        "--allow-empty-values",
        action="store_true",
        default=None,
        help="Count empty values as present in safe mode",
    )
    parser.add_argument(
        "--search-parents",
        action="store_true",
        default=None,
        help="Look for sources in parent directories of the working directory",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gofr-dotenv",
        description="Load, validate and export .env configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log source reads and merges to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    show_parser = subparsers.add_parser(
        "show",
        help="Print the merged configuration",
        description="Print the merged configuration without exporting it",
    )
    _add_source_arguments(show_parser)
    show_parser.add_argument(
        "--format",
        choices=["env", "json"],
        default="env",
        help="Output format. Default: %(default)s",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate against the example source",
        description="Exit with status 1 when keys of the example source are missing",
    )
    _add_source_arguments(check_parser)

    run_parser = subparsers.add_parser(
        "run",
        help="Run a command with the configuration exported",
        description="Run COMMAND with the configuration added to its environment. "
        "Variables already set are kept.",
    )
    _add_source_arguments(run_parser)
    run_parser.add_argument("argv", nargs=argparse.REMAINDER, help="Command and arguments")

    return parser


def options_from_args(args: argparse.Namespace, base: Optional[ConfigOptions] = None) -> ConfigOptions:
    """Overlay command line flags on options read from the environment."""
    options = base if base is not None else ConfigOptions.from_env()

    changes = {
        "path": args.path,
        "defaults": args.defaults,
        "example": args.example,
        "safe": args.safe,
        "allow_empty_values": args.allow_empty_values,
        "search_parents": args.search_parents,
    }
    changes = {name: value for name, value in changes.items() if value is not None}
    if args.no_defaults:
        changes["defaults"] = None

    return options.replace(**changes)


def cmd_show(loader: DotenvLoader, options: ConfigOptions, output_format: str) -> int:
    conf = loader.load(options.replace(export=False))

    if output_format == "json":
        print(json.dumps(conf, indent=2))
        return 0

    try:
        sys.stdout.write(stringify(conf))
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_check(loader: DotenvLoader, options: ConfigOptions) -> int:
    try:
        conf = loader.load(options.replace(safe=True, export=False))
    except MissingEnvVarsError as e:
        print(f"Missing variables: {', '.join(e.missing)}", file=sys.stderr)
        return 1

    print(f"OK: {len(conf)} variables loaded, all required variables present")
    return 0


def cmd_run(loader: DotenvLoader, options: ConfigOptions, argv: List[str]) -> int:
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        print("ERROR: No command given. Usage: gofr-dotenv run [options] -- COMMAND", file=sys.stderr)
        return 1

    environment = MemoryEnvironment(os.environ)
    run_loader = DotenvLoader(reader=loader.reader, environment=environment, logger=loader.logger)
    run_loader.load(options.replace(export=True))

    try:
        completed = subprocess.run(argv, env=environment.to_dict())
    except FileNotFoundError:
        print(f"ERROR: Command not found: {argv[0]}", file=sys.stderr)
        return 127
    return completed.returncode


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    level = logging.DEBUG if args.verbose else None
    loader = DotenvLoader(logger=create_logger(level=level))

    try:
        options = options_from_args(args)
        if args.command == "show":
            return cmd_show(loader, options, args.format)
        elif args.command == "check":
            return cmd_check(loader, options)
        elif args.command == "run":
            return cmd_run(loader, options, args.argv)
    except DotenvError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
