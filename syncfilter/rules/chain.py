#!/usr/bin/env python3
"""Exclusion and inclusion rule sets for directory synchronization.

A FilterChain holds the rules defined for one synchronized directory: a set of
exclusion rules and a set of inclusion rules. A scanner asks, for each entry it
finds, whether the entry is excluded and whether it is included; the two
answers are independent and the chain does not decide between them.

Rule lines have the form ``<sign><axis><strategy>:<pattern>``:
- sign: ``-`` exclusion, ``+`` inclusion
- axis: ``N`` name (not inherited), ``n`` name (inherited), ``p`` path
  (inherited); anything else means an inherited name rule
- strategy: ``g`` glob, ``r`` regex; anything else means glob
- pattern: the rest of the line, which must not be blank

Example:
    >>> chain = FilterChain()
    >>> chain.add("-N:*.tmp")
    True
    >>> chain.excluded("a.tmp", "sub/a.tmp")
    True
    >>> chain.excluded("a.tmp", "sub/a.tmp", only_inheritable=True)
    False
"""

from typing import Iterator, List, NamedTuple, Tuple

from syncfilter.core.constants import DEFAULT_RULES_ENCODING, FilterStrategy, FilterType, Token
from syncfilter.core.lines import LineSource, is_blank, read_lines
from syncfilter.core.logging import get_logger
from syncfilter.rules.errors import FilterSyntaxError, PatternError
from syncfilter.rules.patterns import Filter, make_filter


class FilterClass:
    """Ordered rules of one direction (all exclusions, or all inclusions).

    Path rules and name rules are kept apart so path rules can be evaluated
    first. Insertion order is preserved within each list and duplicates are
    allowed.
    """

    def __init__(self):
        self._paths: List[Filter] = []
        self._names: List[Filter] = []

    def add(self, filter: Filter) -> None:
        """Add a filter to the list for its axis.

        Raises:
            ValueError: If the filter's type is not NAME or PATH
        """
        if filter.type is FilterType.NAME:
            self._names.append(filter)
        elif filter.type is FilterType.PATH:
            self._paths.append(filter)
        else:
            raise ValueError(f"Unknown filter type: {filter.type!r}")

    def clear(self) -> None:
        """Remove all filters."""
        self._paths.clear()
        self._names.clear()

    def empty(self) -> bool:
        """Return True if there are no filters of either axis."""
        return not self._paths and not self._names

    def match(self, name: str, path: str, only_inheritable: bool = False) -> bool:
        """Check whether any applicable filter matches an entry.

        Path filters are tried against ``path`` first, then name filters
        against ``name``. The first match wins.

        Args:
            name: Entry's last path component
            path: Entry's relative path
            only_inheritable: Skip filters that are not inheritable, as when
                applying an ancestor directory's rules to a descendant

        Returns:
            True if some applicable filter matched
        """
        logger = get_logger()

        for candidate, filters in ((path, self._paths), (name, self._names)):
            for f in filters:
                if only_inheritable and not f.inheritable:
                    logger.debug(f"Skipped uninheritable filter {f}")
                    continue

                if f.match(candidate):
                    logger.debug(f"{candidate} matched by {f}")
                    return True

        return False

    def get_filters(self) -> List[Filter]:
        """Get all filters, path filters first.

        Returns:
            New list of filters
        """
        return list(self)

    def __iter__(self) -> Iterator[Filter]:
        yield from self._paths
        yield from self._names

    def __len__(self) -> int:
        """Return number of filters."""
        return len(self._paths) + len(self._names)

    def __bool__(self) -> bool:
        """Return True if any filters are registered."""
        return not self.empty()


class ParsedRule(NamedTuple):
    """A rule line turned into a filter and its direction."""

    exclusion: bool
    filter: Filter


def parse_rule(text: str) -> ParsedRule:
    """Parse one rule line.

    Args:
        text: Rule line, e.g. ``-N:*.tmp`` or ``+pr:^build/.*$``

    Returns:
        Direction and compiled filter

    Raises:
        FilterSyntaxError: If the line is malformed or its regex does not compile
    """
    pos = 0

    # Sign
    sign = text[pos:pos + 1]
    if sign == Token.EXCLUDE:
        exclusion = True
    elif sign == Token.INCLUDE:
        exclusion = False
    else:
        raise FilterSyntaxError("Rule must start with '-' or '+'", text)
    pos += 1

    # Axis, defaults to an inherited name filter
    token = text[pos:pos + 1]
    inheritable = True
    type = FilterType.NAME
    if token == Token.NAME_LOCAL:
        inheritable = False
        pos += 1
    elif token == Token.NAME_INHERITED:
        pos += 1
    elif token == Token.PATH:
        type = FilterType.PATH
        pos += 1

    # Strategy, defaults to glob
    token = text[pos:pos + 1]
    strategy = FilterStrategy.GLOB
    if token == Token.GLOB:
        pos += 1
    elif token == Token.REGEX:
        strategy = FilterStrategy.REGEX
        pos += 1

    if text[pos:pos + 1] != Token.SEPARATOR:
        raise FilterSyntaxError("Expected ':' before the pattern", text)
    pos += 1

    pattern = text[pos:]
    if is_blank(pattern):
        raise FilterSyntaxError("Pattern is empty", text)

    try:
        filter = make_filter(pattern, inheritable, type, strategy)
    except PatternError as e:
        raise FilterSyntaxError(e.message, text) from e

    return ParsedRule(exclusion, filter)


class FilterChain:
    """Exclusion and inclusion rules for one synchronized directory.

    The chain is either empty, or holds exactly the rules of the last
    successful load() plus any rules add()ed since. A failed load() leaves
    the chain as it was.

    The chain does no locking. Callers that query from one thread while
    reloading from another must serialize the two.
    """

    def __init__(self):
        self._exclusions = FilterClass()
        self._inclusions = FilterClass()

    def add(self, text: str) -> bool:
        """Parse a rule line and add it to the matching rule set.

        Args:
            text: Rule line

        Returns:
            True if exactly one filter was added, False (chain unchanged) if
            the line is malformed
        """
        try:
            rule = parse_rule(text)
        except FilterSyntaxError as e:
            return _syntax_error(e)

        self._add_parsed(rule, self._exclusions, self._inclusions)
        return True

    def _add_parsed(self, rule: ParsedRule, exclusions: FilterClass, inclusions: FilterClass) -> None:
        if rule.exclusion:
            get_logger().debug(f"Adding exclusion {rule.filter}")
            exclusions.add(rule.filter)
        else:
            get_logger().debug(f"Adding inclusion {rule.filter}")
            inclusions.add(rule.filter)

    def load(self, source: LineSource, encoding: str = DEFAULT_RULES_ENCODING) -> bool:
        """Replace all rules with those read from source.

        Blank lines and lines starting with ``#`` are ignored. Either every
        remaining line parses and the chain holds exactly those rules, or the
        chain is left exactly as it was.

        Args:
            source: Rule file path, bytes, stream or iterable of lines
            encoding: Encoding of the rule file

        Returns:
            True if the new rules were committed, False if the source could
            not be read or decoded, or a line was malformed
        """
        logger = get_logger()

        try:
            lines = read_lines(source, encoding)
        except (OSError, LookupError, UnicodeDecodeError) as e:
            logger.warning(f"Unable to read filters: {e}")
            return False

        exclusions = FilterClass()
        inclusions = FilterClass()

        for line in lines:
            if line.startswith(Token.COMMENT):
                continue

            try:
                rule = parse_rule(line)
            except FilterSyntaxError as e:
                _syntax_error(e)
                logger.warning("Filters not loaded, keeping previous rules", rule=line)
                return False

            self._add_parsed(rule, exclusions, inclusions)

        self._exclusions, self._inclusions = exclusions, inclusions
        logger.info("Filters loaded", exclusions=len(exclusions), inclusions=len(inclusions))
        return True

    def clear(self) -> None:
        """Remove all exclusion and inclusion rules."""
        self._exclusions.clear()
        self._inclusions.clear()

    def empty(self) -> bool:
        """Return True if there are no rules at all."""
        return self._exclusions.empty() and self._inclusions.empty()

    def excluded(self, name: str, path: str, only_inheritable: bool = False) -> bool:
        """Check whether any exclusion rule matches the entry."""
        return self._exclusions.match(name, path, only_inheritable)

    def included(self, name: str, path: str, only_inheritable: bool = False) -> bool:
        """Check whether any inclusion rule matches the entry."""
        return self._inclusions.match(name, path, only_inheritable)

    @property
    def exclusions(self) -> List[Filter]:
        """Exclusion filters, path filters first."""
        return self._exclusions.get_filters()

    @property
    def inclusions(self) -> List[Filter]:
        """Inclusion filters, path filters first."""
        return self._inclusions.get_filters()

    def describe(self) -> List[str]:
        """Render every rule for diagnostics.

        Returns:
            Lines such as ``-NAME/GLOB:*.tmp``, exclusions first
        """
        rendered: List[Tuple[str, FilterClass]] = [
            (Token.EXCLUDE, self._exclusions),
            (Token.INCLUDE, self._inclusions),
        ]
        return [f"{sign}{f}" for sign, filters in rendered for f in filters]

    def __len__(self) -> int:
        """Return number of rules in both sets."""
        return len(self._exclusions) + len(self._inclusions)


def _syntax_error(error: FilterSyntaxError) -> bool:
    get_logger().debug(f"Syntax error parsing: {error.line} ({error.message})")
    return False
