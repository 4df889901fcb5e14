"""Lazy splitting of delimited attribute values."""

import re
from typing import Iterator, List

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_integer(text: str, minimum: int, maximum: int) -> int:
    if _INTEGER_PATTERN.fullmatch(text) is None:
        raise ValueError(f"Invalid integer: {text!r}")
    value = int(text)
    if value < minimum or value > maximum:
        raise ValueError(f"Integer out of range: {text!r}")
    return value


def parse_int(text: str) -> int:
    """Parse a signed 32-bit decimal integer.

    Only an optional sign followed by ASCII digits is accepted; no
    surrounding whitespace, underscores or other digit forms.

    Raises:
        ValueError: If ``text`` is not such an integer
    """
    return _parse_integer(text, INT_MIN, INT_MAX)


def parse_long(text: str) -> int:
    """Parse a signed 64-bit decimal integer (see ``parse_int``)."""
    return _parse_integer(text, LONG_MIN, LONG_MAX)


class Delimiterator(Iterator[str]):
    """Iterator over the segments of a string split on one delimiter character.

    Segments are produced on demand with ``str.split`` semantics: no
    trimming, no escapes, and an empty subject yields a single empty segment.
    """

    def __init__(self, subject: str, delimiter: str) -> None:
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        self._subject = subject
        self._delimiter = delimiter
        self._index = 0

    def __iter__(self) -> "Delimiterator":
        return self

    def has_next(self) -> bool:
        """Return True if another segment remains."""
        return self._index != -1

    def __next__(self) -> str:
        index = self._index
        if index == -1:
            raise StopIteration
        end = self._subject.find(self._delimiter, index)
        if end == -1:
            self._index = -1
            return self._subject[index:]
        self._index = end + 1
        return self._subject[index:end]

    def to_string_list(self) -> List[str]:
        """Collect the remaining segments."""
        return list(self)

    def to_int_list(self) -> List[int]:
        """Collect the remaining segments as 32-bit integers."""
        return [parse_int(segment) for segment in self]

    def to_long_list(self) -> List[int]:
        """Collect the remaining segments as 64-bit integers."""
        return [parse_long(segment) for segment in self]
