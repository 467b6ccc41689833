"""SyncFilter Rules System.

This module provides the rule engine:
- Filter: one compiled glob or regex rule on the name or path axis
- FilterClass: ordered rules of one direction
- FilterChain: exclusion and inclusion rules, rule-line parsing, atomic reload
"""

from syncfilter.core.constants import FilterStrategy, FilterType

from .chain import FilterChain, FilterClass, ParsedRule, parse_rule
from .errors import FilterSyntaxError, PatternError
from .patterns import (
    Filter,
    filter_strategy_name,
    filter_type_name,
    make_filter,
    wildcard_match,
)

__all__ = [
    # Filters
    "FilterType",
    "FilterStrategy",
    "Filter",
    "make_filter",
    "wildcard_match",
    "filter_type_name",
    "filter_strategy_name",
    # Rule sets
    "FilterClass",
    "FilterChain",
    "ParsedRule",
    "parse_rule",
    # Errors
    "FilterSyntaxError",
    "PatternError",
]
