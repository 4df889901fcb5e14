"""Narrows a configuration document to one recognized child of the root."""

from enum import Enum, auto
from typing import AbstractSet, FrozenSet, Iterable

from ..shared.errors import NoSuchElementError
from ..shared.logging import get_logger
from ..tokenization.events import EventType
from .base import ConfigurationReader
from .delegating import DelegatingReader


class SelectionState(Enum):
    """Progress of a ``SelectingReader`` through the document."""

    BEFORE_ROOT = auto()
    INSIDE_ROOT_BEFORE_MATCH = auto()
    INSIDE_MATCH = auto()
    AFTER_MATCH = auto()


class SelectingReader(DelegatingReader):
    """Exposes only the first root child element in a recognized namespace.

    Children of the root in other namespaces are skipped without being
    examined. The reader reports START_DOCUMENT until the match is read,
    and has no further events once the matched element has ended. When no
    child matches, the current event becomes END_DOCUMENT.
    """

    def __init__(
        self,
        delegate: ConfigurationReader,
        namespaces: Iterable[str],
        close_delegate: bool = True,
    ) -> None:
        super().__init__(delegate, close_delegate)
        self._namespaces: FrozenSet[str] = frozenset(namespaces)
        if delegate.get_event_type() is EventType.START_ELEMENT:
            self._state = SelectionState.INSIDE_ROOT_BEFORE_MATCH
        else:
            self._state = SelectionState.BEFORE_ROOT
        self._event_type = EventType.START_DOCUMENT
        self._pending_match = False
        self._depth = 0
        self._logger = get_logger(__name__, component="selecting")

    @property
    def namespaces(self) -> AbstractSet[str]:
        return self._namespaces

    @property
    def state(self) -> SelectionState:
        return self._state

    def _seek(self) -> None:
        delegate = self.delegate
        if self._state is SelectionState.BEFORE_ROOT:
            while delegate.has_next():
                event_type = delegate.next()
                if event_type is EventType.START_ELEMENT:
                    self._state = SelectionState.INSIDE_ROOT_BEFORE_MATCH
                    break
                if event_type is EventType.END_DOCUMENT:
                    break
        while self._state is SelectionState.INSIDE_ROOT_BEFORE_MATCH:
            if not delegate.has_next():
                break
            event_type = delegate.next()
            if event_type is EventType.START_ELEMENT:
                if delegate.get_namespace_uri() in self._namespaces:
                    self._state = SelectionState.INSIDE_MATCH
                    self._pending_match = True
                    return
                self._logger.debug(
                    "Skipping unrecognized configuration element",
                    extra={"element": str(delegate.get_name())},
                )
                delegate.skip_content()
            elif event_type in (EventType.END_ELEMENT, EventType.END_DOCUMENT):
                break
        if self._state is not SelectionState.INSIDE_MATCH:
            self._state = SelectionState.AFTER_MATCH
            self._event_type = EventType.END_DOCUMENT

    def has_next(self) -> bool:
        if self._state in (SelectionState.BEFORE_ROOT, SelectionState.INSIDE_ROOT_BEFORE_MATCH):
            self._seek()
        if self._pending_match:
            return True
        if self._state is SelectionState.INSIDE_MATCH:
            return self.delegate.has_next()
        return False

    def next(self) -> EventType:
        if not self.has_next():
            raise NoSuchElementError("No events after the selected element")
        if self._pending_match:
            self._pending_match = False
            self._depth = 1
            self._event_type = EventType.START_ELEMENT
            return self._event_type
        event_type = self.delegate.next()
        if event_type is EventType.START_ELEMENT:
            self._depth += 1
        elif event_type is EventType.END_ELEMENT:
            self._depth -= 1
            if self._depth == 0:
                self._state = SelectionState.AFTER_MATCH
        self._event_type = event_type
        return event_type

    def get_event_type(self) -> EventType:
        return self._event_type
