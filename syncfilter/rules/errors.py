"""Exceptions raised while turning rule text into filters."""

from syncfilter.core.constants import ErrorCode


class FilterSyntaxError(Exception):
    """A rule line could not be turned into a filter.

    Covers an invalid sign, a missing ``:`` separator, an empty or
    whitespace-only pattern and a malformed regular expression.
    """

    def __init__(self, message: str, line: str = "", error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize FilterSyntaxError.

        Args:
            message: What is wrong with the line
            line: The offending rule line
            error_code: Associated error code
        """
        super().__init__(message)
        self.message = message
        self.line = line
        self.error_code = error_code


class PatternError(FilterSyntaxError):
    """A regex filter's pattern does not compile."""
