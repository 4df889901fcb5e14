"""Reader exposing a text resource as character events."""

from typing import BinaryIO, NoReturn, Optional

from ..character.stream import CountingReader, DecodingReader
from ..shared.config import DEFAULT_TEXT_BUFFER_SIZE
from ..shared.errors import ConfigXMLParseError, ErrorKind, InvalidStateError, NoSuchElementError
from ..shared.location import XMLLocation
from ..tokenization.events import EventType, QName
from ..tokenization.tokenizer import TokenizerFactory
from .base import ConfigurationReader


class TextReader(ConfigurationReader):
    """Reads a character resource as a run of CHARACTERS events.

    The reader starts on START_DOCUMENT, delivers the text in chunks of at
    most ``buffer_size`` characters and finishes with END_DOCUMENT. One chunk
    is read ahead by ``has_next()`` and swapped in by ``next()``.
    """

    def __init__(
        self,
        charset: str,
        stream: BinaryIO,
        uri: Optional[str],
        included_from: Optional[XMLLocation],
        buffer_size: int = DEFAULT_TEXT_BUFFER_SIZE,
    ) -> None:
        self._reader = CountingReader(DecodingReader(stream, charset))
        self._charset = charset
        self._uri = uri
        self._included_from = included_from
        self._buffer_size = buffer_size
        self._current = ""
        self._next: Optional[str] = None
        self._next_position = (1, 1, 0)
        self._event_type = EventType.START_DOCUMENT
        self._line_number = 1
        self._column_number = 1
        self._character_offset = 0
        self._closed = False

    def _read_ahead(self) -> str:
        if self._next is None:
            if self._closed:
                raise ConfigXMLParseError.of(ErrorKind.INPUT_CLOSED, self.get_location())
            reader = self._reader
            position = (reader.line_number, reader.column_number, reader.character_offset)
            try:
                self._next = reader.read(self._buffer_size)
            except (OSError, UnicodeDecodeError) as error:
                raise ConfigXMLParseError.of(
                    ErrorKind.FAILED_TO_READ_INPUT, self.get_location()
                ) from error
            self._next_position = position
        return self._next

    def has_next(self) -> bool:
        if self._event_type is EventType.END_DOCUMENT or self._closed:
            return False
        # the following event is either the chunk read here or END_DOCUMENT
        self._read_ahead()
        return True

    def next(self) -> EventType:
        if self._event_type is EventType.END_DOCUMENT:
            raise NoSuchElementError("No events after end of document")
        chunk = self._read_ahead()
        self._line_number, self._column_number, self._character_offset = self._next_position
        self._next = None
        if chunk:
            self._current = chunk
            self._event_type = EventType.CHARACTERS
        else:
            self._current = ""
            self._event_type = EventType.END_DOCUMENT
        return self._event_type

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._reader.close()
        except OSError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.FAILED_TO_CLOSE_INPUT, self.get_location()
            ) from error

    def get_event_type(self) -> EventType:
        return self._event_type

    def get_location(self) -> XMLLocation:
        return XMLLocation(
            self._uri,
            self._line_number,
            self._column_number,
            self._character_offset,
            included_from=self._included_from,
        )

    def get_uri(self) -> Optional[str]:
        return self._uri

    def get_included_from(self) -> Optional[XMLLocation]:
        return self._included_from

    def get_tokenizer_factory(self) -> TokenizerFactory:
        raise InvalidStateError("Text resources have no tokenizer")

    def get_text(self) -> str:
        if self._event_type is not EventType.CHARACTERS:
            raise InvalidStateError(f"No text for {self._event_type.description}")
        return self._current

    def get_encoding(self) -> Optional[str]:
        return self._charset

    def get_version(self) -> Optional[str]:
        return None

    def get_character_encoding_scheme(self) -> Optional[str]:
        return None

    def is_standalone(self) -> bool:
        return False

    def standalone_set(self) -> bool:
        return False

    def get_pi_target(self) -> Optional[str]:
        return None

    def get_pi_data(self) -> Optional[str]:
        return None

    # Text has no elements

    def _no_element(self) -> NoReturn:
        raise InvalidStateError(f"Not an element: {self._event_type.description}")

    def get_name(self) -> QName:
        self._no_element()

    def get_local_name(self) -> str:
        self._no_element()

    def get_namespace_uri(self) -> Optional[str]:
        self._no_element()

    def get_prefix(self) -> Optional[str]:
        self._no_element()

    def get_attribute_count(self) -> int:
        self._no_element()

    def get_attribute_name(self, index: int) -> QName:
        self._no_element()

    def get_attribute_namespace(self, index: int) -> Optional[str]:
        self._no_element()

    def get_attribute_local_name(self, index: int) -> str:
        self._no_element()

    def get_attribute_prefix(self, index: int) -> Optional[str]:
        self._no_element()

    def get_attribute_value(self, index: int) -> str:
        self._no_element()

    def get_attribute_value_by_name(self, namespace_uri: Optional[str], local_name: str) -> Optional[str]:
        self._no_element()

    def is_attribute_specified(self, index: int) -> bool:
        self._no_element()

    def get_namespace_count(self) -> int:
        self._no_element()

    def get_namespace_prefix(self, index: int) -> Optional[str]:
        self._no_element()

    def get_namespace_uri_at(self, index: int) -> Optional[str]:
        self._no_element()

    def get_namespace_uri_for_prefix(self, prefix: Optional[str]) -> Optional[str]:
        self._no_element()
