#!/usr/bin/env python3
"""Tests for FilterClass, rule parsing and FilterChain queries."""

import pytest

from syncfilter.core.constants import FilterStrategy, FilterType
from syncfilter.rules.chain import FilterChain, FilterClass, ParsedRule, parse_rule
from syncfilter.rules.errors import FilterSyntaxError
from syncfilter.rules.patterns import Filter


class TestFilterClass:
    """Tests for one direction's rule set."""

    def test_empty_by_default(self):
        """Test a new class has no filters."""
        filters = FilterClass()
        assert filters.empty()
        assert len(filters) == 0
        assert not filters
        assert not filters.match("a", "a")

    def test_add_routes_by_type(self):
        """Test path filters are listed before name filters."""
        filters = FilterClass()
        name = Filter.glob("n", True, FilterType.NAME)
        path = Filter.glob("p", True, FilterType.PATH)
        filters.add(name)
        filters.add(path)
        assert filters.get_filters() == [path, name]
        assert len(filters) == 2
        assert not filters.empty()

    def test_duplicates_allowed(self):
        """Test identical filters are all kept."""
        filters = FilterClass()
        f = Filter.glob("x", True, FilterType.NAME)
        filters.add(f)
        filters.add(f)
        assert len(filters) == 2

    def test_add_unknown_type(self):
        """Test a filter with an unrecognized type is rejected."""
        filters = FilterClass()
        bogus = Filter("x", True, "bogus", FilterStrategy.GLOB)  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            filters.add(bogus)
        assert filters.empty()

    def test_clear(self):
        """Test clear removes both kinds of filter."""
        filters = FilterClass()
        filters.add(Filter.glob("n", True, FilterType.NAME))
        filters.add(Filter.glob("p", True, FilterType.PATH))
        filters.clear()
        assert filters.empty()

    def test_match_uses_axis(self):
        """Test path filters see the path and name filters see the name."""
        filters = FilterClass()
        filters.add(Filter.glob("build/*", True, FilterType.PATH))
        filters.add(Filter.glob("*.o", True, FilterType.NAME))

        assert filters.match("x", "build/x")
        assert filters.match("y.o", "src/y.o")
        # The name is never tested against path filters
        assert not filters.match("build/x", "other/x")

    def test_only_inheritable_skips_local_filters(self):
        """Test non-inheritable filters are skipped when asked."""
        filters = FilterClass()
        filters.add(Filter.glob("secret", False, FilterType.NAME))
        assert filters.match("secret", "secret")
        assert not filters.match("secret", "secret", only_inheritable=True)

    def test_path_filters_tried_first(self, log_messages):
        """Test a path match is reported before any name filter is tried."""
        filters = FilterClass()
        filters.add(Filter.glob("a", True, FilterType.NAME))
        filters.add(Filter.glob("d/a", True, FilterType.PATH))

        assert filters.match("a", "d/a")
        assert log_messages[-1] == "d/a matched by PATH/GLOB:d/a"

    def test_skip_is_logged(self, log_messages):
        """Test skipped filters are reported at DEBUG."""
        filters = FilterClass()
        filters.add(Filter.glob("a", False, FilterType.NAME))
        filters.match("a", "a", only_inheritable=True)
        assert "Skipped uninheritable filter NAME/GLOB:a" in log_messages


class TestParseRule:
    """Tests for the rule-line grammar."""

    @pytest.mark.parametrize(
        "line,exclusion,type,inheritable,strategy,text",
        [
            ("-N:*.tmp", True, FilterType.NAME, False, FilterStrategy.GLOB, "*.tmp"),
            ("-n:*.tmp", True, FilterType.NAME, True, FilterStrategy.GLOB, "*.tmp"),
            ("-:*.tmp", True, FilterType.NAME, True, FilterStrategy.GLOB, "*.tmp"),
            ("+p:build/*", False, FilterType.PATH, True, FilterStrategy.GLOB, "build/*"),
            ("-g:*.tmp", True, FilterType.NAME, True, FilterStrategy.GLOB, "*.tmp"),
            ("-r:a+", True, FilterType.NAME, True, FilterStrategy.REGEX, "a+"),
            ("+nr:^keep_.*$", False, FilterType.NAME, True, FilterStrategy.REGEX, "^keep_.*$"),
            ("-Nr:x", True, FilterType.NAME, False, FilterStrategy.REGEX, "x"),
            ("-pg:a/b", True, FilterType.PATH, True, FilterStrategy.GLOB, "a/b"),
            ("-pr:a/.*", True, FilterType.PATH, True, FilterStrategy.REGEX, "a/.*"),
            ("-: x ", True, FilterType.NAME, True, FilterStrategy.GLOB, " x "),
            ("-::", True, FilterType.NAME, True, FilterStrategy.GLOB, ":"),
            ("-:\u3000", True, FilterType.NAME, True, FilterStrategy.GLOB, "\u3000"),
            ("-:\x1f", True, FilterType.NAME, True, FilterStrategy.GLOB, "\x1f"),
        ],
    )
    def test_valid_lines(self, line, exclusion, type, inheritable, strategy, text):
        """Test each token combination is decoded."""
        rule = parse_rule(line)
        assert isinstance(rule, ParsedRule)
        assert rule.exclusion is exclusion
        assert rule.filter.type is type
        assert rule.filter.inheritable is inheritable
        assert rule.filter.strategy is strategy
        assert rule.filter.text == text

    @pytest.mark.parametrize(
        "line,cause",
        [
            ("", "start with"),
            ("x:foo", "start with"),
            (" -:foo", "start with"),
            ("-", "Expected ':'"),
            ("-N", "Expected ':'"),
            ("-Pfoo", "Expected ':'"),
            ("-P:foo", "Expected ':'"),
            ("-Np:foo", "Expected ':'"),
            ("-rg:foo", "Expected ':'"),
            ("-:", "empty"),
            ("- :", "Expected ':'"),
            ("-: ", "empty"),
            ("-N:\t  ", "empty"),
            ("-:\v\f\r", "empty"),
            ("-r:(", "regular expression"),
        ],
    )
    def test_invalid_lines(self, line, cause):
        """Test malformed lines raise with a distinguishing message."""
        with pytest.raises(FilterSyntaxError) as exc_info:
            parse_rule(line)
        assert cause in exc_info.value.message
        assert exc_info.value.line == line

    def test_uppercase_path_token_is_not_an_axis(self):
        """Test 'P' is not consumed, so '-P:x' is missing its colon."""
        with pytest.raises(FilterSyntaxError):
            parse_rule("-P:x")

    def test_round_trip(self):
        """Test a parsed rule renders back to its components."""
        rule = parse_rule("-p:*.log")
        assert rule.filter.type is FilterType.PATH
        assert rule.filter.strategy is FilterStrategy.GLOB
        assert rule.filter.text == "*.log"
        assert str(rule.filter) == "PATH/GLOB:*.log"


class TestFilterChainAdd:
    """Tests for FilterChain.add()."""

    @pytest.mark.parametrize("line", ["", "x:foo", "-:", "- :", "-r:(", "+p"])
    def test_rejected_lines_leave_chain_empty(self, chain, line):
        """Test malformed lines return False and add nothing."""
        assert chain.add(line) is False
        assert chain.empty()
        assert len(chain) == 0

    def test_rejected_line_leaves_chain_unchanged(self, chain):
        """Test a failed add does not disturb existing rules."""
        assert chain.add("-N:a")
        assert not chain.add("-r:[")
        assert chain.describe() == ["-NAME/GLOB:a"]

    def test_add_routes_by_sign(self, chain):
        """Test '-' rules are exclusions and '+' rules inclusions."""
        assert chain.add("-N:a")
        assert chain.add("+p:b")
        assert [str(f) for f in chain.exclusions] == ["NAME/GLOB:a"]
        assert [str(f) for f in chain.inclusions] == ["PATH/GLOB:b"]
        assert len(chain) == 2

    def test_non_ascii_space_is_a_pattern(self, chain):
        """Test only C-locale whitespace makes a pattern blank."""
        assert chain.add("-:\u3000")
        assert chain.excluded("\u3000", "\u3000")

    def test_add_logs(self, chain, log_messages):
        """Test additions and syntax errors are reported."""
        chain.add("-N:*.tmp")
        chain.add("+r:x")
        chain.add("x:foo")
        assert "Adding exclusion NAME/GLOB:*.tmp" in log_messages
        assert "Adding inclusion NAME/REGEX:x" in log_messages
        assert any(m.startswith("Syntax error parsing: x:foo") for m in log_messages)


class TestFilterChainQueries:
    """Tests for excluded()/included()."""

    def test_inheritance_gating(self, chain):
        """Test 'N' rules only apply locally."""
        chain.add("-N:secret")
        assert chain.excluded("secret", "secret", False)
        assert not chain.excluded("secret", "secret", True)

    @pytest.mark.parametrize("line", ["-n:secret", "-:secret"])
    def test_inherited_name_rules(self, chain, line):
        """Test 'n' and default name rules apply everywhere."""
        chain.add(line)
        assert chain.excluded("secret", "secret", False)
        assert chain.excluded("secret", "secret", True)

    def test_path_rules_are_inheritable(self, chain):
        """Test path rules apply in inherited mode."""
        chain.add("-p:build/out")
        assert chain.excluded("out", "build/out", True)

    def test_axis_separation(self, chain):
        """Test path rules only match the path."""
        chain.add("-p:build/out")
        assert chain.excluded("out", "build/out", False)
        assert not chain.excluded("out", "elsewhere/out", False)

    def test_name_rule_matches_anywhere(self, chain):
        """Test name rules match regardless of the directory."""
        chain.add("-N:out")
        assert chain.excluded("out", "build/out", False)
        assert chain.excluded("out", "elsewhere/out", False)

    def test_glob_strategy(self, chain):
        """Test glob rules require a full match."""
        chain.add("-g:*.tmp")
        assert chain.excluded("a.tmp", "a.tmp", False)
        assert not chain.excluded("a.tmpx", "a.tmpx", False)

    def test_regex_strategy(self, chain):
        """Test regex rules require a full match."""
        chain.add(r"-r:^a\.tmp$")
        assert chain.excluded("a.tmp", "a.tmp", False)
        assert not chain.excluded("a.tmpx", "a.tmpx", False)

    def test_regex_is_not_search(self, chain):
        """Test 'a' does not match 'cat'."""
        chain.add("-r:a")
        assert not chain.excluded("cat", "cat", False)

    def test_directions_are_independent(self, chain):
        """Test an entry can be both excluded and included."""
        chain.add("-N:x")
        chain.add("+N:x")
        assert chain.excluded("x", "x", False)
        assert chain.included("x", "x", False)

    def test_inclusion_only(self, chain):
        """Test inclusion rules do not exclude."""
        chain.add("+nr:^keep_.*$")
        assert chain.included("keep_me", "dir/keep_me")
        assert not chain.excluded("keep_me", "dir/keep_me")

    def test_clear(self, chain):
        """Test clear empties both sets and every query is False."""
        chain.add("-N:x")
        chain.add("+p:*")
        chain.clear()
        assert chain.empty()
        for only_inheritable in (False, True):
            assert not chain.excluded("x", "x", only_inheritable)
            assert not chain.included("x", "x", only_inheritable)
        chain.clear()
        assert chain.empty()

    def test_describe(self, chain):
        """Test describe lists exclusions then inclusions."""
        chain.add("+N:b")
        chain.add("-N:a")
        chain.add("-p:c")
        assert chain.describe() == ["-PATH/GLOB:c", "-NAME/GLOB:a", "+NAME/GLOB:b"]
