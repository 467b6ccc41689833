#!/usr/bin/env python3
r"""Compiled filters: one pattern, one axis, one matching strategy.

A filter is matched against either an entry's name or its relative path (its
axis) using one of two strategies:
- GLOB: shell-style wildcards, ``*`` any run of characters, ``?`` exactly one
- REGEX: extended regular expression, the whole candidate must match

Both strategies are case-sensitive and both match the full candidate string.

Example:
    >>> f = Filter.glob("*.tmp", inheritable=True, type=FilterType.NAME)
    >>> f.match("a.tmp"), f.match("a.tmpx")
    (True, False)
    >>> r = Filter.regex(r"^keep_.*$", inheritable=True, type=FilterType.NAME)
    >>> str(r)
    'NAME/REGEX:^keep_.*$'
"""

import re
import string
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional, Pattern

from syncfilter.core.constants import FilterStrategy, FilterType
from syncfilter.rules.errors import PatternError

# Flags shared by every regex filter
REGEX_FLAGS = re.NOFLAG

# POSIX bracket classes and their Python set equivalents
POSIX_CLASSES: Dict[str, str] = {
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "alnum": "a-zA-Z0-9",
    "upper": "A-Z",
    "lower": "a-z",
    "xdigit": "0-9A-Fa-f",
    "space": r" \t\n\r\f\v",
    "blank": r" \t",
    "punct": re.escape(string.punctuation),
    "cntrl": r"\x00-\x1f\x7f",
    "print": r"\x20-\x7e",
    "graph": r"\x21-\x7e",
}


def translate_wildcard(pattern: str) -> str:
    """Translate a wildcard pattern into an equivalent regex.

    Only ``*`` and ``?`` are special; every other character, brackets
    included, stands for itself.

    Args:
        pattern: Wildcard pattern

    Returns:
        Regex source suitable for a full match
    """
    parts = []
    previous = ""
    for char in pattern:
        if char == "*":
            if previous != "*":
                parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        previous = char
    return "".join(parts)


@lru_cache(maxsize=1024)
def _compile_wildcard(pattern: str) -> Pattern:
    return re.compile(translate_wildcard(pattern), re.DOTALL)


def wildcard_match(candidate: str, pattern: str) -> bool:
    """Check whether candidate matches a wildcard pattern.

    Args:
        candidate: String to test (a name or a relative path)
        pattern: Wildcard pattern using ``*`` and ``?``

    Returns:
        True if the whole candidate matches
    """
    return _compile_wildcard(pattern).fullmatch(candidate) is not None


def translate_posix_classes(pattern: str) -> str:
    """Replace POSIX bracket classes such as ``[:alpha:]`` with explicit sets.

    Classes are only recognised inside a bracket expression, so ``[[:alpha:]]``
    becomes ``[a-zA-Z]`` while a top-level ``[:alpha:]`` stays an ordinary set
    of the characters ``:alph``. A ``]`` right after the opening ``[`` or
    ``[^`` is a literal member of the set.

    Args:
        pattern: Extended regular expression text

    Returns:
        Pattern text Python's ``re`` understands

    Raises:
        PatternError: If a bracket expression names an unknown class
    """
    parts = []
    pos = 0
    end = len(pattern)
    in_bracket = False

    while pos < end:
        char = pattern[pos]

        if char == "\\":
            parts.append(pattern[pos:pos + 2])
            pos += 2
        elif not in_bracket:
            parts.append(char)
            pos += 1
            if char == "[":
                in_bracket = True
                if pattern.startswith("^", pos):
                    parts.append("^")
                    pos += 1
                if pattern.startswith("]", pos):
                    parts.append(r"\]")
                    pos += 1
        elif char == "]":
            parts.append(char)
            pos += 1
            in_bracket = False
        elif pattern.startswith("[:", pos):
            close = pattern.find(":]", pos + 2)
            name = pattern[pos + 2:close] if close != -1 else ""
            if not name.isalpha():
                # Not a class, just a literal '[' in the set
                parts.append(r"\[")
                pos += 1
                continue
            if name not in POSIX_CLASSES:
                raise PatternError(f"Unknown character class [:{name}:]", pattern)
            parts.append(POSIX_CLASSES[name])
            pos = close + 2
        elif char == "[":
            parts.append(r"\[")
            pos += 1
        else:
            parts.append(char)
            pos += 1

    return "".join(parts)


def compile_regex(pattern: str) -> Pattern:
    """Compile an extended regular expression with the shared flags.

    Raises:
        PatternError: If the pattern is malformed
    """
    try:
        return re.compile(translate_posix_classes(pattern), REGEX_FLAGS)
    except re.error as e:
        raise PatternError(f"Invalid regular expression: {e}", pattern)


@dataclass(frozen=True)
class Filter:
    """A single compiled rule.

    Build instances with Filter.glob() or Filter.regex(); the strategy tag
    selects how match() tests a candidate. A REGEX filter compiles its
    pattern on construction, whichever way it is built.

    Attributes:
        text: Pattern text exactly as written in the rule
        inheritable: Whether the rule also applies below its own directory
        type: Axis the rule is matched against (NAME or PATH)
        strategy: GLOB or REGEX
    """

    text: str
    inheritable: bool
    type: FilterType
    strategy: FilterStrategy
    _regex: Optional[Pattern] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.strategy is FilterStrategy.REGEX and self._regex is None:
            # Frozen dataclass, so bypass __setattr__
            object.__setattr__(self, "_regex", compile_regex(self.text))

    @classmethod
    def glob(cls, text: str, inheritable: bool, type: FilterType) -> "Filter":
        """Create a wildcard filter. Never fails."""
        return cls(text, inheritable, type, FilterStrategy.GLOB)

    @classmethod
    def regex(cls, text: str, inheritable: bool, type: FilterType) -> "Filter":
        """Create a regex filter.

        Raises:
            PatternError: If text is not a valid regular expression
        """
        return cls(text, inheritable, type, FilterStrategy.REGEX)

    def match(self, candidate: str) -> bool:
        """Check whether candidate matches this filter's pattern.

        Args:
            candidate: Entry name or relative path, depending on the axis

        Returns:
            True if the whole candidate matches
        """
        if self.strategy is FilterStrategy.GLOB:
            return wildcard_match(candidate, self.text)
        elif self.strategy is FilterStrategy.REGEX:
            return self._regex.fullmatch(candidate) is not None

        raise ValueError(f"Unknown filter strategy: {self.strategy!r}")

    def __str__(self) -> str:
        return f"{filter_type_name(self.type)}/{filter_strategy_name(self.strategy)}:{self.text}"


def make_filter(text: str, inheritable: bool, type: FilterType, strategy: FilterStrategy) -> Filter:
    """Create a filter of the given strategy.

    Raises:
        PatternError: If strategy is REGEX and text does not compile
    """
    if strategy is FilterStrategy.REGEX:
        return Filter.regex(text, inheritable, type)
    return Filter.glob(text, inheritable, type)


def filter_type_name(type: FilterType) -> str:
    """Render a filter axis for diagnostics ("NAME" or "PATH")."""
    return type.name


def filter_strategy_name(strategy: FilterStrategy) -> str:
    """Render a matching strategy for diagnostics ("GLOB" or "REGEX")."""
    return strategy.name
