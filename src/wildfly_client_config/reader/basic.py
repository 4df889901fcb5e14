"""Reader over a single XML document."""

from typing import Optional

from ..shared.errors import ConfigXMLParseError, ErrorKind, InvalidStateError, NoSuchElementError
from ..shared.location import XMLLocation
from ..tokenization.events import Attribute, EventType, QName
from ..tokenization.tokenizer import InputClosedError, PullTokenizer, TokenizerError, TokenizerFactory
from .base import ConfigurationReader


class BasicReader(ConfigurationReader):
    """Exposes one ``PullTokenizer`` as a configuration reader.

    Tokenizer and stream failures are translated into ``ConfigXMLParseError``
    located in this document, including the include chain that led here.
    The reader owns the tokenizer and its stream.
    """

    def __init__(
        self,
        tokenizer: PullTokenizer,
        uri: Optional[str],
        included_from: Optional[XMLLocation],
        tokenizer_factory: TokenizerFactory,
    ) -> None:
        self._tokenizer = tokenizer
        self._uri = uri
        self._included_from = included_from
        self._tokenizer_factory = tokenizer_factory

    def _translate(self, error: Exception) -> ConfigXMLParseError:
        if isinstance(error, InputClosedError):
            return ConfigXMLParseError.of(ErrorKind.INPUT_CLOSED, self.get_location())
        if isinstance(error, TokenizerError):
            return ConfigXMLParseError.from_exception(error, self._uri, self._included_from)
        return ConfigXMLParseError.of(ErrorKind.FAILED_TO_READ_INPUT, self.get_location())

    def has_next(self) -> bool:
        return self._tokenizer.has_next()

    def next(self) -> EventType:
        if not self._tokenizer.has_next():
            if self._tokenizer.closed:
                raise self._translate(InputClosedError("closed"))
            raise NoSuchElementError("No events after end of document")
        try:
            return self._tokenizer.next()
        except (TokenizerError, OSError) as error:
            raise self._translate(error) from error

    def close(self) -> None:
        try:
            self._tokenizer.close()
        except OSError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.FAILED_TO_CLOSE_INPUT, self.get_location()
            ) from error

    def get_event_type(self) -> EventType:
        return self._tokenizer.event_type

    def get_location(self) -> XMLLocation:
        tokenizer = self._tokenizer
        return XMLLocation(
            self._uri,
            tokenizer.line_number,
            tokenizer.column_number,
            tokenizer.character_offset,
            included_from=self._included_from,
        )

    def get_uri(self) -> Optional[str]:
        return self._uri

    def get_included_from(self) -> Optional[XMLLocation]:
        return self._included_from

    def get_tokenizer_factory(self) -> TokenizerFactory:
        return self._tokenizer_factory

    # Element accessors

    def get_name(self) -> QName:
        name = self._tokenizer.name
        if name is None or not self.has_name():
            raise InvalidStateError(f"No name for {self.get_event_type().description}")
        return name

    def get_local_name(self) -> str:
        name = self._tokenizer.name
        if name is None:
            raise InvalidStateError(f"No name for {self.get_event_type().description}")
        return name.local_name

    def get_namespace_uri(self) -> Optional[str]:
        name = self._tokenizer.name
        return name.namespace_uri if name is not None else None

    def get_prefix(self) -> Optional[str]:
        name = self._tokenizer.name
        return name.prefix if name is not None else None

    def _attribute(self, index: int) -> Attribute:
        if self.get_event_type() is not EventType.START_ELEMENT:
            raise InvalidStateError(
                f"No attributes for {self.get_event_type().description}"
            )
        return self._tokenizer.attributes[index]

    def get_attribute_count(self) -> int:
        if self.get_event_type() is not EventType.START_ELEMENT:
            raise InvalidStateError(
                f"No attributes for {self.get_event_type().description}"
            )
        return len(self._tokenizer.attributes)

    def get_attribute_name(self, index: int) -> QName:
        return self._attribute(index).name

    def get_attribute_namespace(self, index: int) -> Optional[str]:
        return self._attribute(index).name.namespace_uri

    def get_attribute_local_name(self, index: int) -> str:
        return self._attribute(index).name.local_name

    def get_attribute_prefix(self, index: int) -> Optional[str]:
        return self._attribute(index).name.prefix

    def get_attribute_value(self, index: int) -> str:
        return self._attribute(index).value

    def get_attribute_value_by_name(self, namespace_uri: Optional[str], local_name: str) -> Optional[str]:
        wanted = QName(namespace_uri or None, local_name)
        for index in range(self.get_attribute_count()):
            attribute = self._attribute(index)
            if attribute.name == wanted:
                return attribute.value
        return None

    def is_attribute_specified(self, index: int) -> bool:
        return self._attribute(index).specified

    def get_namespace_count(self) -> int:
        return len(self._tokenizer.namespaces)

    def get_namespace_prefix(self, index: int) -> Optional[str]:
        return self._tokenizer.namespaces[index][0]

    def get_namespace_uri_at(self, index: int) -> Optional[str]:
        return self._tokenizer.namespaces[index][1]

    def get_namespace_uri_for_prefix(self, prefix: Optional[str]) -> Optional[str]:
        return self._tokenizer.lookup_namespace(prefix)

    # Text and document accessors

    def get_text(self) -> str:
        text = self._tokenizer.text
        if text is None:
            raise InvalidStateError(f"No text for {self.get_event_type().description}")
        return text

    def get_pi_target(self) -> Optional[str]:
        return self._tokenizer.pi_target

    def get_pi_data(self) -> Optional[str]:
        if self.get_event_type() is not EventType.PROCESSING_INSTRUCTION:
            return None
        return self._tokenizer.text

    def get_encoding(self) -> Optional[str]:
        return self._tokenizer.encoding

    def get_version(self) -> Optional[str]:
        return self._tokenizer.version

    def get_character_encoding_scheme(self) -> Optional[str]:
        return self._tokenizer.declared_encoding

    def is_standalone(self) -> bool:
        return self._tokenizer.standalone

    def standalone_set(self) -> bool:
        return self._tokenizer.standalone_set
