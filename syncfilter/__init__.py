"""SyncFilter - ignore/include rules for directory synchronization.

Classifies the entries found while scanning a synchronized directory tree as
excluded and/or included, according to rules read from a rule file.

Example:
    >>> from syncfilter import FilterChain
    >>> chain = FilterChain()
    >>> chain.load(["-N:*.tmp", "-p:build/*"])
    True
    >>> chain.excluded("out.o", "build/out.o")
    True
"""

from syncfilter.core.constants import SYNCFILTER_VERSION as __version__
from syncfilter.rules import (
    Filter,
    FilterChain,
    FilterClass,
    FilterStrategy,
    FilterSyntaxError,
    FilterType,
    PatternError,
)

__all__ = [
    "__version__",
    "Filter",
    "FilterChain",
    "FilterClass",
    "FilterStrategy",
    "FilterSyntaxError",
    "FilterType",
    "PatternError",
]
