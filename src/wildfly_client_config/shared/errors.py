"""Exceptions raised while reading configuration documents.

All problems found in a configuration document, or in the resources it
includes, surface as ``ConfigXMLParseError``. Each error carries an
``ErrorKind`` (a stable numeric code plus message template) and the
``XMLLocation`` where the problem was found.
"""

import re
from enum import Enum
from typing import Any, Optional

from .location import XMLLocation

MESSAGE_PREFIX = "CONF"

# Stripped from messages produced by the tokenizer; the location is kept
# separately on the error.
_PARSE_ERROR_PREFIX = re.compile(r"^ParseError at \[row,col\]:\[[0-9]+,[0-9]+\]\s*Message: ")


class ErrorKind(Enum):
    """Kinds of configuration errors with their codes and message templates."""

    PARSE_ERROR = (1, "An unspecified XML parse error occurred")
    UNEXPECTED_DOCUMENT_END = (3, "Unexpected end of document")
    UNEXPECTED_CONTENT = (4, 'Unexpected content of type "{0}"')
    UNEXPECTED_ELEMENT = (5, 'Unexpected element "{0}" encountered')
    EXPECTED_START_OR_END_ELEMENT = (6, 'Expected start or end element, found "{0}"')
    EXPECTED_START_ELEMENT = (7, 'Expected start element, found "{0}"')
    TEXT_CANNOT_CONTAIN_ELEMENTS = (8, "Text content cannot contain elements")
    EXPECTED_EVENT_TYPE = (9, 'Expected event type "{0}", found "{1}"')
    EXPECTED_NAMESPACE = (10, 'Expected namespace URI "{0}", found "{1}"')
    EXPECTED_LOCAL_NAME = (11, 'Expected local name "{0}", found "{1}"')
    FAILED_TO_READ_INPUT = (12, "Failed to read from input source")
    FAILED_TO_CLOSE_INPUT = (13, "Failed to close input source")
    INVALID_URL = (14, "Invalid configuration file URL")
    UNEXPECTED_ATTRIBUTE = (15, 'Unexpected attribute "{0}" encountered')
    MISSING_REQUIRED_ELEMENT = (16, 'Missing required element "{0}" from namespace "{1}"')
    MISSING_REQUIRED_ATTRIBUTE = (17, 'Missing required attribute "{0}" from namespace "{1}"')
    NUMERIC_PARSE = (18, 'Failed to parse integer value of attribute "{0}"')
    URI_PARSE = (19, 'Failed to parse URI value of attribute "{0}"')
    NUMERIC_OUT_OF_RANGE = (20, 'Integer value of attribute "{0}" is out of range ({1}..{2})')
    INET_ADDRESS_PARSE = (21, 'Failed to parse IP address value of attribute "{0}"')
    CIDR_PARSE = (22, 'Failed to parse CIDR address value of attribute "{0}"')
    EXPRESSION_PARSE = (23, 'Failed to parse expression value of attribute "{0}"')
    INVALID_INCLUDE_URI = (24, "Invalid include URI{0}")
    INVALID_INCLUDE_PARSE_TYPE = (
        25,
        'Invalid include directive: unknown parse type "{0}" (must be "text" or "xml")',
    )
    INCLUDE_DEPTH_EXCEEDED = (26, "Include nesting exceeds the maximum depth of {0}")
    INPUT_CLOSED = (27, "Input source has been closed")

    def __init__(self, code: int, template: str) -> None:
        self.code = code
        self.template = template

    def render(self, *args: Any) -> str:
        """Render the message for this kind with its code prefix."""
        text = self.template.format(*args) if args else self.template.replace("{0}", "")
        return f"{MESSAGE_PREFIX}{self.code:06d}: {text}"


def clean_message(message: Optional[str]) -> Optional[str]:
    """Strip the tokenizer's position prefix from an error message."""
    if message is None:
        return None
    return _PARSE_ERROR_PREFIX.sub("", message, count=1)


class ConfigXMLParseError(Exception):
    """A configuration document could not be read.

    ``str(error)`` is the rendered location followed by the message.

    Attributes:
        kind: The kind of failure
        message: Human readable message, without location
        location: Where the failure was detected
    """

    def __init__(
        self,
        message: Optional[str] = None,
        location: Optional[XMLLocation] = None,
        kind: ErrorKind = ErrorKind.PARSE_ERROR,
    ) -> None:
        self.kind = kind
        self.message = message if message is not None else kind.render()
        self.location = location if location is not None else XMLLocation.UNKNOWN
        super().__init__(f"{self.location}{self.message}")

    @classmethod
    def of(cls, kind: ErrorKind, location: Optional[XMLLocation], *args: Any) -> "ConfigXMLParseError":
        """Build an error of the given kind.

        Args:
            kind: Kind of failure
            location: Where it was detected
            *args: Values substituted into the kind's message template

        Returns:
            New error; the caller raises it
        """
        return cls(kind.render(*args), location, kind)

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        uri: Optional[str] = None,
        included_from: Optional[XMLLocation] = None,
    ) -> "ConfigXMLParseError":
        """Translate a lower level exception.

        Tokenizer errors keep their line/column/offset. Anything else is
        located at the document URI only.

        Args:
            exception: Exception to translate
            uri: URI of the document being read
            included_from: Location of the including directive, if any

        Returns:
            The translated error, or ``exception`` itself if it is already a
            ``ConfigXMLParseError``
        """
        if isinstance(exception, ConfigXMLParseError):
            return exception
        line = getattr(exception, "line_number", -1)
        column = getattr(exception, "column_number", -1)
        offset = getattr(exception, "character_offset", -1)
        location = XMLLocation(uri, line, column, offset, included_from=included_from)
        message = clean_message(str(exception)) or None
        return cls(message, location, ErrorKind.PARSE_ERROR)


class NoSuchElementError(LookupError):
    """``next()`` was called on a reader with no further events."""


class InvalidStateError(RuntimeError):
    """An accessor was used on a reader or event that does not support it."""
