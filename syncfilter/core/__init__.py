"""SyncFilter Core - Shared utilities.

Import specific functions from submodules:
    from syncfilter.core.config import ConfigManager
    from syncfilter.core import constants
    from syncfilter.core.lines import read_lines
    from syncfilter.core.logging import get_logger
"""

from syncfilter.core import (
    config,
    constants,
    lines,
    logging,
)

__all__ = [
    "config",
    "constants",
    "lines",
    "logging",
]
