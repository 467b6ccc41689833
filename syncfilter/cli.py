#!/usr/bin/env python3
"""Command-line interface for SyncFilter.

This module provides the ``syncfilter`` command:
- ``check``: load a rule file and classify relative paths
- ``lint``: report every malformed line of a rule file

Example:
    >>> from syncfilter.cli import parse_arguments
    >>> args = parse_arguments(["check", "-r", ".syncignore", "build/out.o"])
"""

import argparse
import sys
from pathlib import Path, PurePosixPath
from typing import List, Optional

from syncfilter.core.config import ConfigError, ConfigManager, ConfigSource
from syncfilter.core.constants import SYNCFILTER_VERSION, ConfigKey, ErrorCode, Token
from syncfilter.core.lines import decode, numbered_lines
from syncfilter.core.logging import Logger, configure_logging, get_logger
from syncfilter.rules.chain import FilterChain, parse_rule
from syncfilter.rules.errors import FilterSyntaxError

DESCRIPTION = "SyncFilter - ignore/include rules for directory synchronization"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message)
        self.error_code = error_code


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="syncfilter",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Classify paths against the rules in ./.syncignore
  syncfilter check build/out.o src/main.c

  # Apply a parent directory's rules to entries of a subdirectory
  syncfilter check -r ../.syncignore --inherited docs/notes.tmp

  # Report malformed lines
  syncfilter lint .syncignore
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {SYNCFILTER_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (rule additions, skips and matches)",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log records to FILE",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Classify paths against a rule file")
    check.add_argument(
        "-r",
        "--rules",
        metavar="FILE",
        type=str,
        help="Rule file (default: rules.filename from configuration)",
    )
    check.add_argument(
        "--inherited",
        action="store_true",
        help="Only apply inheritable rules, as for entries below the rule file's directory",
    )
    check.add_argument(
        "paths",
        metavar="PATH",
        nargs="+",
        help="Paths relative to the rule file's directory",
    )

    lint = subparsers.add_parser("lint", help="Report malformed lines in a rule file")
    lint.add_argument("rules", metavar="FILE", type=str, help="Rule file to check")

    return parser.parse_args(args)


def build_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build the configuration from an optional file and command-line arguments.

    Command-line arguments take precedence over file configuration.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration manager

    Raises:
        CLIError: If the configuration file cannot be loaded
    """
    try:
        config = ConfigManager(args.config)
    except ConfigError as e:
        raise CLIError(e.message, e.error_code)

    if args.debug:
        config.set(ConfigKey.LOGGING_LEVEL, "DEBUG", ConfigSource.CLI_ARGS)
    if args.log_file:
        config.set(ConfigKey.LOGGING_FILE, args.log_file, ConfigSource.CLI_ARGS)
    if getattr(args, "rules", None):
        config.set(ConfigKey.RULES_FILENAME, args.rules, ConfigSource.CLI_ARGS)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Args:
        config: Configuration manager

    Returns:
        Configured logger instance
    """
    try:
        return configure_logging(
            config.get(ConfigKey.LOGGING_LEVEL, "WARNING"),
            config.get(ConfigKey.LOGGING_FILE),
        )
    except KeyError as e:
        raise CLIError(f"Unknown log level: {e}")


def classify(chain: FilterChain, path: str, only_inheritable: bool) -> str:
    """
    Describe how a chain classifies one relative path.

    Args:
        chain: Loaded filter chain
        path: Relative path, '/' separated
        only_inheritable: Whether to apply inheritable rules only

    Returns:
        "excluded", "included", "excluded,included" or "-"
    """
    name = PurePosixPath(path).name or path
    labels = []
    if chain.excluded(name, path, only_inheritable):
        labels.append("excluded")
    if chain.included(name, path, only_inheritable):
        labels.append("included")
    return ",".join(labels) or "-"


def run_check(args: argparse.Namespace, config: ConfigManager) -> int:
    """
    Load a rule file and print the classification of each path.

    Returns:
        Process exit code
    """
    rules_file = Path(config.get(ConfigKey.RULES_FILENAME))
    if not rules_file.is_file():
        raise CLIError(f"Rule file does not exist: {rules_file}", ErrorCode.NOT_FOUND)

    chain = FilterChain()
    with get_logger().add_context(rules_file=rules_file):
        loaded = chain.load(rules_file, config.get(ConfigKey.RULES_ENCODING))
    if not loaded:
        raise CLIError(f"Rule file rejected: {rules_file} (run 'syncfilter lint' for details)")

    for path in args.paths:
        print(f"{path}\t{classify(chain, path, args.inherited)}")

    return ErrorCode.SUCCESS


def run_lint(args: argparse.Namespace, config: ConfigManager) -> int:
    """
    Parse every rule line of a file and report the malformed ones.

    Returns:
        Process exit code, INVALID_INPUT if any line is malformed
    """
    rules_file = Path(args.rules)
    try:
        text = decode(rules_file.read_bytes(), config.get(ConfigKey.RULES_ENCODING))
    except FileNotFoundError:
        raise CLIError(f"Rule file does not exist: {rules_file}", ErrorCode.NOT_FOUND)
    except (OSError, LookupError, UnicodeDecodeError) as e:
        raise CLIError(f"Failed to read rule file: {rules_file}\n{e}")

    errors = 0
    for number, line in numbered_lines(text):
        if line.startswith(Token.COMMENT):
            continue

        try:
            parse_rule(line)
        except FilterSyntaxError as e:
            print(f"{rules_file}:{number}: {e.message}: {line}")
            errors += 1

    return ErrorCode.INVALID_INPUT if errors else ErrorCode.SUCCESS


COMMANDS = {
    "check": run_check,
    "lint": run_lint,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code
    """
    try:
        args = parse_arguments(argv)
        config = build_config(args)
        setup_logging(config)
        return int(COMMANDS[args.command](args, config))

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return int(e.error_code)

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
