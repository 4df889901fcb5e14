"""Event model shared by the tokenizer and every reader layer."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class EventType(Enum):
    """Kinds of pull-parser events."""

    START_DOCUMENT = auto()
    END_DOCUMENT = auto()
    START_ELEMENT = auto()
    END_ELEMENT = auto()
    CHARACTERS = auto()
    CDATA = auto()
    SPACE = auto()                   # whitespace outside the root element
    COMMENT = auto()
    PROCESSING_INSTRUCTION = auto()
    ENTITY_REFERENCE = auto()        # reference to an entity that was not expanded
    DTD = auto()
    ATTRIBUTE = auto()
    NAMESPACE = auto()
    ENTITY_DECLARATION = auto()
    NOTATION_DECLARATION = auto()

    @property
    def description(self) -> str:
        """Human readable name used in error messages."""
        return _DESCRIPTIONS.get(self, "unknown")


_DESCRIPTIONS = {
    EventType.START_DOCUMENT: "document start",
    EventType.END_DOCUMENT: "document end",
    EventType.START_ELEMENT: "start element",
    EventType.END_ELEMENT: "end element",
    EventType.CDATA: "cdata",
    EventType.CHARACTERS: "characters",
    EventType.ATTRIBUTE: "attribute",
    EventType.DTD: "dtd",
    EventType.ENTITY_DECLARATION: "entity declaration",
    EventType.ENTITY_REFERENCE: "entity reference",
    EventType.NAMESPACE: "namespace",
    EventType.NOTATION_DECLARATION: "notation declaration",
    EventType.PROCESSING_INSTRUCTION: "processing instruction",
    EventType.SPACE: "white space",
    EventType.COMMENT: "comment",
}


def event_to_string(event_type: Optional[EventType]) -> str:
    """Describe ``event_type`` for messages; ``None`` is "unknown"."""
    if event_type is None:
        return "unknown"
    return event_type.description


@dataclass(frozen=True)
class QName:
    """Namespace-qualified name.

    Two names are equal when namespace and local name match; the prefix is
    informational.
    """

    namespace_uri: Optional[str]
    local_name: str
    prefix: Optional[str] = field(default=None, compare=False)

    @property
    def clark(self) -> str:
        """``{namespace}local`` notation, or just the local name."""
        if self.namespace_uri:
            return f"{{{self.namespace_uri}}}{self.local_name}"
        return self.local_name

    def __str__(self) -> str:
        return self.clark


@dataclass(frozen=True)
class Attribute:
    """An attribute of a start element."""

    name: QName
    value: str
    specified: bool = True
