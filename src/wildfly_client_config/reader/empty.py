"""A reader with no events."""

from typing import NoReturn, Optional

from ..shared.errors import InvalidStateError, NoSuchElementError
from ..shared.location import XMLLocation
from ..tokenization.events import EventType, QName
from ..tokenization.tokenizer import TokenizerFactory
from .base import ConfigurationReader


class EmptyReader(ConfigurationReader):
    """Reader that is already positioned on END_DOCUMENT.

    Stands in for an include directive that produced nothing.
    """

    def __init__(self, uri: Optional[str] = None, included_from: Optional[XMLLocation] = None) -> None:
        self._uri = uri
        self._included_from = included_from

    def has_next(self) -> bool:
        return False

    def next(self) -> EventType:
        raise NoSuchElementError("Empty reader has no events")

    def close(self) -> None:
        pass

    def get_event_type(self) -> EventType:
        return EventType.END_DOCUMENT

    def get_location(self) -> XMLLocation:
        return XMLLocation.UNKNOWN

    def get_uri(self) -> Optional[str]:
        return self._uri

    def get_included_from(self) -> Optional[XMLLocation]:
        return self._included_from

    def get_tokenizer_factory(self) -> TokenizerFactory:
        raise InvalidStateError("Empty reader has no tokenizer")

    def _invalid(self) -> NoReturn:
        raise InvalidStateError("Empty reader has no current event data")

    def get_name(self) -> QName:
        self._invalid()

    def get_local_name(self) -> str:
        self._invalid()

    def get_namespace_uri(self) -> Optional[str]:
        self._invalid()

    def get_prefix(self) -> Optional[str]:
        self._invalid()

    def get_attribute_count(self) -> int:
        self._invalid()

    def get_attribute_name(self, index: int) -> QName:
        self._invalid()

    def get_attribute_namespace(self, index: int) -> Optional[str]:
        self._invalid()

    def get_attribute_local_name(self, index: int) -> str:
        self._invalid()

    def get_attribute_prefix(self, index: int) -> Optional[str]:
        self._invalid()

    def get_attribute_value(self, index: int) -> str:
        self._invalid()

    def get_attribute_value_by_name(self, namespace_uri: Optional[str], local_name: str) -> Optional[str]:
        self._invalid()

    def is_attribute_specified(self, index: int) -> bool:
        self._invalid()

    def get_namespace_count(self) -> int:
        self._invalid()

    def get_namespace_prefix(self, index: int) -> Optional[str]:
        self._invalid()

    def get_namespace_uri_at(self, index: int) -> Optional[str]:
        self._invalid()

    def get_namespace_uri_for_prefix(self, prefix: Optional[str]) -> Optional[str]:
        self._invalid()

    def get_text(self) -> str:
        self._invalid()

    def get_pi_target(self) -> Optional[str]:
        return None

    def get_pi_data(self) -> Optional[str]:
        return None

    def get_encoding(self) -> Optional[str]:
        return None

    def get_version(self) -> Optional[str]:
        return None

    def get_character_encoding_scheme(self) -> Optional[str]:
        return None

    def is_standalone(self) -> bool:
        return False

    def standalone_set(self) -> bool:
        return False
