"""Entry point for reading a client configuration file.

Example:
    >>> configuration = ClientConfiguration.get_instance("file:///etc/app/wildfly-config.xml")
    >>> with configuration.read_configuration({"urn:example:subsystem:1.0"}) as reader:
    ...     while reader.has_next():
    ...         reader.next()
"""

from contextlib import ExitStack
from typing import BinaryIO, Callable, Iterable, Optional

from ..shared.config import ReaderConfig
from ..shared.errors import ConfigXMLParseError, ErrorKind
from ..shared.location import XMLLocation
from ..shared.logging import get_logger
from ..shared.uri import is_absolute, open_url
from ..reader.base import ConfigurationReader
from ..reader.basic import BasicReader
from ..reader.selecting import SelectingReader
from ..reader.xinclude import XIncludeReader
from ..tokenization.events import EventType
from ..tokenization.tokenizer import TokenizerFactory
from .discovery import find_configuration_uri

ROOT_ELEMENT = "configuration"
ROOT_NAMESPACE = "urn:wildfly:client:1.0"

StreamOpener = Callable[[str], BinaryIO]

_PROLOG_EVENTS = frozenset({
    EventType.START_DOCUMENT,
    EventType.SPACE,
    EventType.COMMENT,
    EventType.PROCESSING_INSTRUCTION,
    EventType.DTD,
})


def default_stream_opener(config: ReaderConfig) -> StreamOpener:
    """Opener that fetches URIs with ``urllib`` and the configured Accept header."""

    def open_stream(uri: str) -> BinaryIO:
        return open_url(uri, {"Accept": config.document_accept}, config.url_timeout)

    return open_stream


def open_uri(
    uri: str,
    factory: TokenizerFactory,
    stream_opener: Optional[StreamOpener] = None,
) -> BasicReader:
    """Open ``uri`` as a ``BasicReader``.

    Args:
        uri: Absolute URI of the document
        factory: Tokenizer factory for the document and its includes
        stream_opener: Opens the byte stream, default ``urllib``

    Raises:
        ConfigXMLParseError: INVALID_URL if ``uri`` cannot be used as a URL,
            FAILED_TO_READ_INPUT if it cannot be opened
    """
    opener = stream_opener or default_stream_opener(factory.config)
    location = XMLLocation(uri)
    try:
        stream = opener(uri)
    except ValueError as error:
        raise ConfigXMLParseError.of(ErrorKind.INVALID_URL, location) from error
    except OSError as error:
        raise ConfigXMLParseError.of(ErrorKind.FAILED_TO_READ_INPUT, location) from error
    return BasicReader(factory.create_tokenizer(stream), uri, None, factory)


class ClientConfiguration:
    """A client configuration file that can be read by several subsystems.

    Each call to ``read_configuration`` opens the file again and returns a
    reader limited to the caller's own element.
    """

    def __init__(
        self,
        uri: str,
        config: Optional[ReaderConfig] = None,
        stream_opener: Optional[StreamOpener] = None,
    ) -> None:
        self._uri = uri
        self._config = config or ReaderConfig()
        self._stream_opener = stream_opener
        self._logger = get_logger(__name__, self._config.correlation_id, "configuration")

    @classmethod
    def get_instance(
        cls,
        uri: Optional[str] = None,
        config: Optional[ReaderConfig] = None,
        stream_opener: Optional[StreamOpener] = None,
    ) -> Optional["ClientConfiguration"]:
        """Create a configuration for ``uri`` or for the discovered default.

        Args:
            uri: Absolute URI of the configuration file; discovered when None
            config: Reader settings
            stream_opener: Opens byte streams for the root document

        Returns:
            The configuration, or None if no URI was given and none was found

        Raises:
            ConfigXMLParseError: INVALID_URL if ``uri`` is not absolute
        """
        config = config or ReaderConfig()
        if uri is None:
            uri = find_configuration_uri(config.properties)
            if uri is None:
                return None
        if not is_absolute(uri):
            raise ConfigXMLParseError.of(ErrorKind.INVALID_URL, XMLLocation(uri))
        return cls(uri, config, stream_opener)

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def config(self) -> ReaderConfig:
        return self._config

    def get_configuration_uri(self) -> str:
        return self._uri

    def create_tokenizer_factory(self) -> TokenizerFactory:
        """Tokenizer factory with validation, DTDs and external entities disabled."""
        return TokenizerFactory(self._config)

    def read_configuration(self, namespaces: Iterable[str]) -> Optional[ConfigurationReader]:
        """Open the file and select the first root child in ``namespaces``.

        The returned reader owns the open stream; close it when done.

        Args:
            namespaces: Namespace URIs recognized by the caller

        Returns:
            A reader over the selected element, or None for an empty document

        Raises:
            ConfigXMLParseError: If the file cannot be read or its root
                element is not ``configuration``
        """
        namespaces = frozenset(namespaces)
        self._logger.info(
            "Reading client configuration",
            extra={"uri": self._uri, "namespaces": sorted(namespaces)},
        )
        reader = open_uri(self._uri, self.create_tokenizer_factory(), self._stream_opener)
        with ExitStack() as stack:
            stack.push(reader)
            include_reader = XIncludeReader(reader)
            event_type = include_reader.get_event_type()
            while include_reader.has_next():
                event_type = include_reader.next()
                if event_type not in _PROLOG_EVENTS:
                    break
            else:
                event_type = EventType.END_DOCUMENT
            if event_type is EventType.END_DOCUMENT:
                self._logger.debug("Configuration document is empty", extra={"uri": self._uri})
                return None
            if event_type is not EventType.START_ELEMENT:
                raise include_reader.unexpected_content()
            self._check_root(include_reader)
            stack.pop_all()
        return SelectingReader(include_reader, namespaces)

    @staticmethod
    def _check_root(reader: ConfigurationReader) -> None:
        namespace_uri = reader.get_namespace_uri()
        if reader.get_local_name() != ROOT_ELEMENT or namespace_uri not in (None, ROOT_NAMESPACE):
            raise reader.unexpected_element()
        if reader.get_attribute_count() > 0:
            raise reader.unexpected_attribute(0)
