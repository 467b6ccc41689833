"""Line sources for rule files.

Rule files are read whole and split into lines on any run of ``\\r`` and
``\\n`` characters. Lines containing nothing but whitespace are dropped; every
other line is returned exactly as written, leading and trailing whitespace
included.

Whitespace means the C-locale set `` \\t\\n\\v\\f\\r`` only, so a line holding
an ideographic space or a control character such as ``\\x1f`` is not blank.
"""
import os
from typing import Iterable, Iterator, List, Tuple, Union

from syncfilter.core.constants import DEFAULT_RULES_ENCODING

LineSource = Union[str, os.PathLike, bytes, bytearray, Iterable[str]]

WHITESPACE = " \t\n\v\f\r"
LINE_BREAKS = "\r\n"


def is_blank(text: str) -> bool:
    """Return True if text is empty or holds only WHITESPACE characters."""
    return not text.strip(WHITESPACE)


def split_lines(text: str) -> List[str]:
    """Split text into its non-blank lines.

    Args:
        text: Complete rule file contents

    Returns:
        Lines in file order, unmodified, blank lines omitted

    Example:
        >>> split_lines("-N:*.tmp\\r\\n\\n   \\n+p:keep")
        ['-N:*.tmp', '+p:keep']
    """
    return [line for _, line in numbered_lines(text)]


def numbered_lines(text: str) -> List[Tuple[int, str]]:
    """Split text into its non-blank lines, each with its 1-based line number.

    Lines are split exactly as split_lines() splits them. Numbering counts
    ``\\r\\n``, ``\\n`` and a lone ``\\r`` as one line break each, so blank
    lines still advance the count.

    Example:
        >>> numbered_lines("a\\r\\n\\r\\nb")
        [(1, 'a'), (3, 'b')]
    """
    numbered = []
    number = 1
    for line, breaks in _iter_lines(text):
        if not is_blank(line):
            numbered.append((number, line))
        number += breaks.count("\r") + breaks.count("\n") - breaks.count("\r\n")
    return numbered


def _iter_lines(text: str) -> Iterator[Tuple[str, str]]:
    start = 0
    end = len(text)

    while start < end:
        stop = start
        while stop < end and text[stop] not in LINE_BREAKS:
            stop += 1

        following = stop
        while following < end and text[following] in LINE_BREAKS:
            following += 1

        yield text[start:stop], text[stop:following]
        start = following


def decode(data: Union[bytes, bytearray], encoding: str = DEFAULT_RULES_ENCODING) -> str:
    """Decode raw rule file contents.

    Raises:
        LookupError: If encoding is not a known codec
        UnicodeDecodeError: If data is not valid in encoding
    """
    return bytes(data).decode(encoding)


def read_lines(source: LineSource, encoding: str = DEFAULT_RULES_ENCODING) -> List[str]:
    """Read a line source into its non-blank lines.

    Args:
        source: One of
            - a filesystem path (str or os.PathLike), read as a file
            - raw bytes, decoded with ``encoding``
            - a binary or text stream (anything with ``read()``)
            - an iterable of already split lines
        encoding: Encoding used for paths, bytes and binary streams

    Returns:
        Lines in source order, blank lines omitted

    Raises:
        OSError: If a file or stream cannot be read
        LookupError: If ``encoding`` is not a known codec
        UnicodeDecodeError: If the contents are not valid in ``encoding``
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return split_lines(decode(f.read(), encoding))

    if isinstance(source, (bytes, bytearray)):
        return split_lines(decode(source, encoding))

    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, (bytes, bytearray)):
            data = decode(data, encoding)
        return split_lines(data)

    lines: List[str] = []
    for chunk in source:
        lines.extend(split_lines(chunk))
    return lines
