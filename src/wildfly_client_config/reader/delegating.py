"""Readers that wrap another reader."""

from typing import Optional

from ..shared.errors import NoSuchElementError
from ..shared.location import XMLLocation
from ..tokenization.events import EventType, QName
from ..tokenization.tokenizer import TokenizerFactory
from .base import ConfigurationReader


class DelegatingReader(ConfigurationReader):
    """Forwards every operation to ``delegate``.

    Subclasses override ``delegate`` to switch the target dynamically and
    override individual operations to filter the event stream. Navigation
    helpers inherited from ``ConfigurationReader`` always go through this
    reader's own ``next()``.
    """

    def __init__(self, delegate: ConfigurationReader, close_delegate: bool = True) -> None:
        self._delegate = delegate
        self._close_delegate = close_delegate

    @property
    def delegate(self) -> ConfigurationReader:
        return self._delegate

    def has_next(self) -> bool:
        return self.delegate.has_next()

    def next(self) -> EventType:
        return self.delegate.next()

    def close(self) -> None:
        if self._close_delegate:
            self.delegate.close()

    def get_event_type(self) -> EventType:
        return self.delegate.get_event_type()

    def get_location(self) -> XMLLocation:
        return self.delegate.get_location()

    def get_uri(self) -> Optional[str]:
        return self.delegate.get_uri()

    def get_included_from(self) -> Optional[XMLLocation]:
        return self.delegate.get_included_from()

    def get_tokenizer_factory(self) -> TokenizerFactory:
        return self.delegate.get_tokenizer_factory()

    def get_name(self) -> QName:
        return self.delegate.get_name()

    def get_local_name(self) -> str:
        return self.delegate.get_local_name()

    def get_namespace_uri(self) -> Optional[str]:
        return self.delegate.get_namespace_uri()

    def get_prefix(self) -> Optional[str]:
        return self.delegate.get_prefix()

    def get_attribute_count(self) -> int:
        return self.delegate.get_attribute_count()

    def get_attribute_name(self, index: int) -> QName:
        return self.delegate.get_attribute_name(index)

    def get_attribute_namespace(self, index: int) -> Optional[str]:
        return self.delegate.get_attribute_namespace(index)

    def get_attribute_local_name(self, index: int) -> str:
        return self.delegate.get_attribute_local_name(index)

    def get_attribute_prefix(self, index: int) -> Optional[str]:
        return self.delegate.get_attribute_prefix(index)

    def get_attribute_value(self, index: int) -> str:
        return self.delegate.get_attribute_value(index)

    def get_attribute_value_by_name(self, namespace_uri: Optional[str], local_name: str) -> Optional[str]:
        return self.delegate.get_attribute_value_by_name(namespace_uri, local_name)

    def is_attribute_specified(self, index: int) -> bool:
        return self.delegate.is_attribute_specified(index)

    def get_namespace_count(self) -> int:
        return self.delegate.get_namespace_count()

    def get_namespace_prefix(self, index: int) -> Optional[str]:
        return self.delegate.get_namespace_prefix(index)

    def get_namespace_uri_at(self, index: int) -> Optional[str]:
        return self.delegate.get_namespace_uri_at(index)

    def get_namespace_uri_for_prefix(self, prefix: Optional[str]) -> Optional[str]:
        return self.delegate.get_namespace_uri_for_prefix(prefix)

    def get_text(self) -> str:
        return self.delegate.get_text()

    def get_pi_target(self) -> Optional[str]:
        return self.delegate.get_pi_target()

    def get_pi_data(self) -> Optional[str]:
        return self.delegate.get_pi_data()

    def get_encoding(self) -> Optional[str]:
        return self.delegate.get_encoding()

    def get_version(self) -> Optional[str]:
        return self.delegate.get_version()

    def get_character_encoding_scheme(self) -> Optional[str]:
        return self.delegate.get_character_encoding_scheme()

    def is_standalone(self) -> bool:
        return self.delegate.is_standalone()

    def standalone_set(self) -> bool:
        return self.delegate.standalone_set()


class ScopedReader(DelegatingReader):
    """Limits a reader to the content of the element it is positioned in.

    Depth starts at zero. The END_ELEMENT that would take the depth below
    zero closes the scope: it is consumed from the delegate and reported as
    END_DOCUMENT, after which the reader has no further events.
    """

    def __init__(self, delegate: ConfigurationReader, close_delegate: bool = False) -> None:
        super().__init__(delegate, close_delegate)
        self._depth = 0
        self._ended = False

    @property
    def depth(self) -> int:
        return self._depth

    def has_next(self) -> bool:
        return not self._ended and self.delegate.has_next()

    def next(self) -> EventType:
        if self._ended:
            raise NoSuchElementError("Scope already ended")
        event_type = self.delegate.next()
        if event_type is EventType.START_ELEMENT:
            self._depth += 1
        elif event_type is EventType.END_ELEMENT:
            self._depth -= 1
            if self._depth < 0:
                self._ended = True
                return EventType.END_DOCUMENT
        elif event_type is EventType.END_DOCUMENT:
            self._ended = True
        return event_type

    def get_event_type(self) -> EventType:
        if self._ended:
            return EventType.END_DOCUMENT
        return self.delegate.get_event_type()


class DrainingReader(DelegatingReader):
    """Consumes whatever remains of its delegate when closed."""

    def __init__(self, delegate: ConfigurationReader, close_delegate: bool = False) -> None:
        super().__init__(delegate, close_delegate)

    def close(self) -> None:
        delegate = self.delegate
        while delegate.has_next():
            delegate.next()
        super().close()
