"""The pull-reader contract shared by every configuration reader layer.

``ConfigurationReader`` declares the event and accessor interface each layer
implements, and provides the navigation helpers (``next_tag``,
``get_element_text``, ``skip_content`` ...) and typed attribute helpers on
top of it.
"""

import ipaddress
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Union

from ..shared.delimiter import Delimiterator, parse_int, parse_long
from ..shared.errors import ConfigXMLParseError, ErrorKind
from ..shared.expressions import Expression, ExpressionSyntaxError, PropertyResolver
from ..shared.location import XMLLocation
from ..shared.uri import parse_uri
from ..tokenization.events import EventType, QName, event_to_string
from ..tokenization.tokenizer import TokenizerFactory

XML_WHITESPACE = " \t\r\n"

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

_SKIPPABLE = frozenset({
    EventType.SPACE,
    EventType.COMMENT,
    EventType.PROCESSING_INSTRUCTION,
})
_TEXT_EVENTS = frozenset({
    EventType.CHARACTERS,
    EventType.CDATA,
    EventType.SPACE,
    EventType.COMMENT,
    EventType.DTD,
    EventType.ENTITY_REFERENCE,
})


class ConfigurationReader(ABC):
    """A pull reader over a configuration document.

    Readers start positioned on START_DOCUMENT. ``next()`` advances and
    returns the new event type; ``has_next()`` reports whether another event
    is available. Readers are iterable over event types and close
    themselves when used as context managers.
    """

    # Stream control

    @abstractmethod
    def has_next(self) -> bool:
        """Return True if ``next()`` will produce another event."""

    @abstractmethod
    def next(self) -> EventType:
        """Advance to the next event and return its type.

        Raises:
            ConfigXMLParseError: If the input is malformed or unreadable
            NoSuchElementError: If there are no further events
        """

    @abstractmethod
    def close(self) -> None:
        """Release the resources this reader owns."""

    # Current state

    @abstractmethod
    def get_event_type(self) -> EventType:
        """Type of the current event."""

    @abstractmethod
    def get_location(self) -> XMLLocation:
        """Location of the current event."""

    @abstractmethod
    def get_uri(self) -> Optional[str]:
        """URI of the document being read."""

    @abstractmethod
    def get_included_from(self) -> Optional[XMLLocation]:
        """Location of the include directive that pulled this document in."""

    @abstractmethod
    def get_tokenizer_factory(self) -> TokenizerFactory:
        """Factory used to create tokenizers for included documents."""

    # Element accessors

    @abstractmethod
    def get_name(self) -> QName: ...

    @abstractmethod
    def get_local_name(self) -> str: ...

    @abstractmethod
    def get_namespace_uri(self) -> Optional[str]: ...

    @abstractmethod
    def get_prefix(self) -> Optional[str]: ...

    @abstractmethod
    def get_attribute_count(self) -> int: ...

    @abstractmethod
    def get_attribute_name(self, index: int) -> QName: ...

    @abstractmethod
    def get_attribute_namespace(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def get_attribute_local_name(self, index: int) -> str: ...

    @abstractmethod
    def get_attribute_prefix(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def get_attribute_value(self, index: int) -> str: ...

    @abstractmethod
    def get_attribute_value_by_name(self, namespace_uri: Optional[str], local_name: str) -> Optional[str]:
        """Value of the named attribute of the current element, or None."""

    @abstractmethod
    def is_attribute_specified(self, index: int) -> bool: ...

    @abstractmethod
    def get_namespace_count(self) -> int:
        """Number of namespace declarations on the current element."""

    @abstractmethod
    def get_namespace_prefix(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def get_namespace_uri_at(self, index: int) -> Optional[str]: ...

    @abstractmethod
    def get_namespace_uri_for_prefix(self, prefix: Optional[str]) -> Optional[str]:
        """Namespace bound to ``prefix`` in the current scope."""

    # Text and document accessors

    @abstractmethod
    def get_text(self) -> str: ...

    @abstractmethod
    def get_pi_target(self) -> Optional[str]: ...

    @abstractmethod
    def get_pi_data(self) -> Optional[str]: ...

    @abstractmethod
    def get_encoding(self) -> Optional[str]:
        """Encoding of the input, if known."""

    @abstractmethod
    def get_version(self) -> Optional[str]:
        """XML version from the declaration, if any."""

    @abstractmethod
    def get_character_encoding_scheme(self) -> Optional[str]:
        """Encoding named by the XML declaration, if any."""

    @abstractmethod
    def is_standalone(self) -> bool: ...

    @abstractmethod
    def standalone_set(self) -> bool: ...

    # Python protocols

    def __iter__(self) -> Iterator[EventType]:
        while self.has_next():
            yield self.next()

    def __enter__(self) -> "ConfigurationReader":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # Event classification

    def is_start_element(self) -> bool:
        return self.get_event_type() is EventType.START_ELEMENT

    def is_end_element(self) -> bool:
        return self.get_event_type() is EventType.END_ELEMENT

    def is_characters(self) -> bool:
        return self.get_event_type() is EventType.CHARACTERS

    def is_white_space(self) -> bool:
        """True for SPACE, or CHARACTERS/CDATA consisting only of whitespace."""
        event_type = self.get_event_type()
        if event_type is EventType.SPACE:
            return True
        if event_type in (EventType.CHARACTERS, EventType.CDATA):
            return not self.get_text().strip(XML_WHITESPACE)
        return False

    def has_name(self) -> bool:
        return self.get_event_type() in (EventType.START_ELEMENT, EventType.END_ELEMENT)

    def has_text(self) -> bool:
        return self.get_event_type() in _TEXT_EVENTS

    # Navigation

    def next_tag(self) -> EventType:
        """Advance to the next START_ELEMENT or END_ELEMENT.

        Whitespace, comments and processing instructions are skipped.

        Raises:
            ConfigXMLParseError: If any other event is encountered
        """
        event_type = self.next()
        while (
            event_type in _SKIPPABLE
            or (event_type in (EventType.CHARACTERS, EventType.CDATA) and self.is_white_space())
        ):
            event_type = self.next()
        if event_type not in (EventType.START_ELEMENT, EventType.END_ELEMENT):
            raise ConfigXMLParseError.of(
                ErrorKind.EXPECTED_START_OR_END_ELEMENT,
                self.get_location(),
                event_to_string(event_type),
            )
        return event_type

    def require(
        self,
        event_type: EventType,
        namespace_uri: Optional[str] = None,
        local_name: Optional[str] = None,
    ) -> None:
        """Check the current event type and, if given, its namespace and local name.

        Raises:
            ConfigXMLParseError: If any check fails
        """
        actual = self.get_event_type()
        if actual is not event_type:
            raise ConfigXMLParseError.of(
                ErrorKind.EXPECTED_EVENT_TYPE,
                self.get_location(),
                event_to_string(event_type),
                event_to_string(actual),
            )
        if namespace_uri is not None and namespace_uri != self.get_namespace_uri():
            raise ConfigXMLParseError.of(
                ErrorKind.EXPECTED_NAMESPACE,
                self.get_location(),
                namespace_uri,
                self.get_namespace_uri(),
            )
        if local_name is not None and local_name != self.get_local_name():
            raise ConfigXMLParseError.of(
                ErrorKind.EXPECTED_LOCAL_NAME,
                self.get_location(),
                local_name,
                self.get_local_name(),
            )

    def get_element_text(self) -> str:
        """Read the text content of the current element.

        The reader must be on START_ELEMENT; it is left on the matching
        END_ELEMENT. Comments and processing instructions are ignored.

        Raises:
            ConfigXMLParseError: If the element contains child elements or the
                document ends first
        """
        if self.get_event_type() is not EventType.START_ELEMENT:
            raise ConfigXMLParseError.of(
                ErrorKind.EXPECTED_START_ELEMENT,
                self.get_location(),
                event_to_string(self.get_event_type()),
            )
        parts: List[str] = []
        while True:
            event_type = self.next()
            if event_type is EventType.END_ELEMENT:
                return "".join(parts)
            if event_type in (
                EventType.CHARACTERS,
                EventType.CDATA,
                EventType.SPACE,
                EventType.ENTITY_REFERENCE,
            ):
                parts.append(self.get_text())
            elif event_type in (EventType.PROCESSING_INSTRUCTION, EventType.COMMENT):
                continue
            elif event_type is EventType.END_DOCUMENT:
                raise ConfigXMLParseError.of(
                    ErrorKind.UNEXPECTED_DOCUMENT_END, self.get_location()
                )
            elif event_type is EventType.START_ELEMENT:
                raise ConfigXMLParseError.of(
                    ErrorKind.TEXT_CANNOT_CONTAIN_ELEMENTS, self.get_location()
                )
            else:
                raise ConfigXMLParseError.of(
                    ErrorKind.UNEXPECTED_CONTENT,
                    self.get_location(),
                    event_to_string(event_type),
                )

    def skip_content(self) -> None:
        """Skip to the END_ELEMENT matching the current nesting level."""
        while self.has_next():
            event_type = self.next()
            if event_type is EventType.START_ELEMENT:
                self.skip_content()
            elif event_type is EventType.END_ELEMENT:
                return

    # Error factories

    def unexpected_element(self) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(
            ErrorKind.UNEXPECTED_ELEMENT, self.get_location(), self.get_name()
        )

    def unexpected_attribute(self, index: int) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(
            ErrorKind.UNEXPECTED_ATTRIBUTE,
            self.get_location(),
            self.get_attribute_name(index),
        )

    def unexpected_content(self) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(
            ErrorKind.UNEXPECTED_CONTENT,
            self.get_location(),
            event_to_string(self.get_event_type()),
        )

    def unexpected_document_end(self) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(ErrorKind.UNEXPECTED_DOCUMENT_END, self.get_location())

    def missing_required_element(self, namespace_uri: Optional[str], local_name: str) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(
            ErrorKind.MISSING_REQUIRED_ELEMENT, self.get_location(), local_name, namespace_uri
        )

    def missing_required_attribute(self, namespace_uri: Optional[str], local_name: str) -> ConfigXMLParseError:
        return ConfigXMLParseError.of(
            ErrorKind.MISSING_REQUIRED_ATTRIBUTE, self.get_location(), local_name, namespace_uri
        )

    # Attribute helpers

    def get_property_resolver(self) -> PropertyResolver:
        """Resolver for ``${...}`` expressions in attribute values."""
        return PropertyResolver(self.get_tokenizer_factory().config.properties)

    def _compile_attribute(self, index: int) -> Expression:
        try:
            return Expression.compile(self.get_attribute_value(index))
        except ExpressionSyntaxError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.EXPRESSION_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error

    def _attribute_text(self, index: int, resolve: bool) -> str:
        if not resolve:
            return self.get_attribute_value(index)
        return self._compile_attribute(index).evaluate(self.get_property_resolver())

    def _integer_attribute(self, index, resolve, parser, min_value, max_value) -> int:
        text = self._attribute_text(index, resolve)
        try:
            value = parser(text)
        except ValueError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.NUMERIC_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error
        if (min_value is not None and value < min_value) or (
            max_value is not None and value > max_value
        ):
            raise ConfigXMLParseError.of(
                ErrorKind.NUMERIC_OUT_OF_RANGE,
                self.get_location(),
                self.get_attribute_name(index),
                "" if min_value is None else min_value,
                "" if max_value is None else max_value,
            )
        return value

    def get_int_attribute_value(
        self,
        index: int,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
        resolve: bool = False,
    ) -> int:
        """Attribute value as a 32-bit integer, optionally range checked (inclusive).

        Args:
            index: Attribute index
            min_value: Smallest accepted value
            max_value: Largest accepted value
            resolve: Expand ``${...}`` expressions first

        Raises:
            ConfigXMLParseError: NUMERIC_PARSE or NUMERIC_OUT_OF_RANGE
        """
        return self._integer_attribute(index, resolve, parse_int, min_value, max_value)

    def get_long_attribute_value(
        self,
        index: int,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
        resolve: bool = False,
    ) -> int:
        """Attribute value as a 64-bit integer (see ``get_int_attribute_value``)."""
        return self._integer_attribute(index, resolve, parse_long, min_value, max_value)

    def get_list_attribute_value_as_iterator(self, index: int, resolve: bool = False) -> Delimiterator:
        """Space separated attribute value as a lazy iterator of tokens."""
        return Delimiterator(self._attribute_text(index, resolve), " ")

    def get_list_attribute_value(self, index: int, resolve: bool = False) -> List[str]:
        """Space separated attribute value as a list of tokens."""
        return self.get_list_attribute_value_as_iterator(index, resolve).to_string_list()

    def _numeric_list(self, index: int, resolve: bool, long_values: bool) -> List[int]:
        tokens = self.get_list_attribute_value_as_iterator(index, resolve)
        try:
            return tokens.to_long_list() if long_values else tokens.to_int_list()
        except ValueError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.NUMERIC_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error

    def get_int_list_attribute_value(self, index: int, resolve: bool = False) -> List[int]:
        return self._numeric_list(index, resolve, long_values=False)

    def get_long_list_attribute_value(self, index: int, resolve: bool = False) -> List[int]:
        return self._numeric_list(index, resolve, long_values=True)

    def get_uri_attribute_value(self, index: int, resolve: bool = False) -> str:
        """Attribute value checked as a URI reference.

        Raises:
            ConfigXMLParseError: URI_PARSE
        """
        text = self._attribute_text(index, resolve)
        try:
            return parse_uri(text)
        except ValueError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.URI_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error

    def get_inet_address_attribute_value(self, index: int, resolve: bool = False) -> Optional[IPAddress]:
        """Attribute value as an IPv4 or IPv6 address literal."""
        text = self._attribute_text(index, resolve)
        if text is None:
            return None
        try:
            return ipaddress.ip_address(text)
        except ValueError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.INET_ADDRESS_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error

    def get_cidr_address_attribute_value(self, index: int, resolve: bool = False) -> Optional[IPNetwork]:
        """Attribute value as a CIDR network; host bits are masked off."""
        text = self._attribute_text(index, resolve)
        if text is None:
            return None
        try:
            return ipaddress.ip_network(text, strict=False)
        except ValueError as error:
            raise ConfigXMLParseError.of(
                ErrorKind.CIDR_PARSE,
                self.get_location(),
                self.get_attribute_name(index),
            ) from error

    def get_expression_attribute_value(self, index: int) -> Expression:
        """Attribute value compiled as an expression, not yet evaluated."""
        return self._compile_attribute(index)

    def get_boolean_attribute_value(self, index: int, resolve: bool = False) -> bool:
        """True only for a case-insensitive "true"."""
        return self._attribute_text(index, resolve).lower() == "true"
