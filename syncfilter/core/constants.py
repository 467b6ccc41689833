"""
SyncFilter Core: Constants and Type Definitions

This module provides package-wide constants, error codes, filter enums and the
tokens of the rule-file grammar.
"""
from enum import Enum, IntEnum

# Version information
SYNCFILTER_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for SyncFilter operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad rule line, invalid configuration
    NOT_FOUND = 2  # File or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions


class FilterType(Enum):
    """Which part of a candidate entry a filter is matched against."""

    NAME = "name"  # Last path component only
    PATH = "path"  # Full relative path


class FilterStrategy(Enum):
    """How a filter's pattern text is matched."""

    GLOB = "glob"  # Shell-style wildcards (*, ?)
    REGEX = "regex"  # Extended regular expression, full match


# Rule grammar: <sign><axis><strategy>:<pattern>
class Token:
    """Characters recognised by the rule-line parser."""

    # Sign
    EXCLUDE = "-"
    INCLUDE = "+"

    # Axis
    NAME_LOCAL = "N"  # Name filter, not inherited
    NAME_INHERITED = "n"  # Name filter, inherited
    PATH = "p"  # Path filter, always inherited

    # Strategy
    GLOB = "g"
    REGEX = "r"

    # Structure
    SEPARATOR = ":"
    COMMENT = "#"


# Rule files
DEFAULT_RULES_FILENAME = ".syncignore"
DEFAULT_RULES_ENCODING = "utf-8"


# Configuration keys
class ConfigKey:
    """Configuration key constants (dot paths under the root key)."""

    ROOT = "syncfilter"

    RULES_FILENAME = "syncfilter.rules.filename"
    RULES_ENCODING = "syncfilter.rules.encoding"

    LOGGING_LEVEL = "syncfilter.logging.level"
    LOGGING_FILE = "syncfilter.logging.file"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        "rules": {
            "filename": DEFAULT_RULES_FILENAME,
            "encoding": DEFAULT_RULES_ENCODING,
        },
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }
}
