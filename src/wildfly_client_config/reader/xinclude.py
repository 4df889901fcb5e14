"""XInclude processing for configuration documents.

Supports XInclude 1.0 ``include`` and ``fallback`` without XPointer. An
include directive is replaced in the event stream by the events of the
referenced resource, read as XML (``parse="xml"``, the default) or as text
(``parse="text"``). Directives that cannot be honoured without XPointer or
an unknown charset use their ``fallback`` child instead; I/O and XML errors
in the referenced resource are reported, not recovered from.
"""

from contextlib import ExitStack
from typing import Dict, Optional

from ..character.encoding import lookup_charset
from ..shared.errors import ConfigXMLParseError, ErrorKind, InvalidStateError, NoSuchElementError
from ..shared.logging import get_logger
from ..shared.uri import has_fragment, is_absolute, is_opaque, open_url, parse_uri, resolve_uri
from ..tokenization.events import EventType
from .base import ConfigurationReader
from .basic import BasicReader
from .delegating import DelegatingReader, DrainingReader, ScopedReader
from .empty import EmptyReader
from .text import TextReader

XINCLUDE_NAMESPACE = "http://www.w3.org/2001/XInclude"

DEFAULT_CHARSET = "utf-8"


class XIncludeReader(DelegatingReader):
    """Splices included resources into the event stream of its delegate.

    While an include is being read, every accessor answers for the included
    resource (the child); afterwards reading continues in the delegate after
    the include directive's end tag. Include elements themselves never
    appear in the output.
    """

    def __init__(self, delegate: ConfigurationReader, close_delegate: bool = True) -> None:
        super().__init__(delegate, close_delegate)
        self._child: Optional[ConfigurationReader] = None
        self._logger = get_logger(__name__, self._correlation_id(delegate), "xinclude")

    @staticmethod
    def _correlation_id(delegate: ConfigurationReader) -> Optional[str]:
        try:
            return delegate.get_tokenizer_factory().config.correlation_id
        except InvalidStateError:
            return None

    @property
    def delegate(self) -> ConfigurationReader:
        child = self._child
        return child if child is not None else self._delegate

    def next(self) -> EventType:
        child = self._child
        if child is not None:
            event_type = self._next_included(child)
            if event_type is not EventType.END_DOCUMENT:
                return event_type
            self._child = None
            child.close()
        raw = self._delegate
        if not raw.has_next():
            raise NoSuchElementError("No events after end of document")
        while True:
            event_type = raw.next()
            if (
                event_type is not EventType.START_ELEMENT
                or raw.get_namespace_uri() != XINCLUDE_NAMESPACE
            ):
                return event_type
            if raw.get_local_name() != "include":
                raise self.unexpected_element()
            first = self._start_child(self._process_include())
            if first is not None:
                return first

    def close(self) -> None:
        with ExitStack() as stack:
            if self._close_delegate:
                stack.callback(self._delegate.close)
            child, self._child = self._child, None
            if child is not None:
                stack.callback(child.close)

    def skip_content(self) -> None:
        if self._child is None:
            # Includes inside skipped content are never resolved
            self._delegate.skip_content()
        else:
            super().skip_content()

    def _start_child(self, nested: ConfigurationReader) -> Optional[EventType]:
        """Take the first content event of ``nested`` or discard it if it has none."""
        with ExitStack() as stack:
            stack.push(nested)
            event_type = self._next_included(nested)
            if event_type is EventType.END_DOCUMENT:
                self._logger.debug(
                    "Include produced no content",
                    extra={"uri": self._delegate.get_uri()},
                )
                return None
            stack.pop_all()
        self._child = nested
        return event_type

    @staticmethod
    def _next_included(child: ConfigurationReader) -> EventType:
        """Next event of an included resource.

        START_DOCUMENT and whitespace outside the included root element are not
        part of the included content.
        """
        while child.has_next():
            event_type = child.next()
            if event_type is not EventType.START_DOCUMENT and event_type is not EventType.SPACE:
                return event_type
        return EventType.END_DOCUMENT

    def _process_include(self) -> ConfigurationReader:
        raw = self._delegate
        location = raw.get_location()
        href: Optional[str] = None
        parse_as_text = False
        fallback = False
        charset = DEFAULT_CHARSET
        accept: Optional[str] = None
        accept_language: Optional[str] = None
        for index in range(raw.get_attribute_count()):
            if raw.get_attribute_namespace(index) is not None:
                continue
            local_name = raw.get_attribute_local_name(index)
            value = raw.get_attribute_value(index)
            if local_name == "href":
                try:
                    href = parse_uri(value)
                except ValueError as error:
                    raise ConfigXMLParseError.of(
                        ErrorKind.INVALID_INCLUDE_URI, location, ""
                    ) from error
                if has_fragment(href):
                    raise ConfigXMLParseError.of(
                        ErrorKind.INVALID_INCLUDE_URI,
                        location,
                        ": must not contain fragment identifier",
                    )
                if is_opaque(href):
                    fallback = True
            elif local_name == "parse":
                if value == "xml":
                    parse_as_text = False
                elif value == "text":
                    parse_as_text = True
                else:
                    raise ConfigXMLParseError.of(
                        ErrorKind.INVALID_INCLUDE_PARSE_TYPE, location, value
                    )
            elif local_name == "xpointer":
                fallback = True
            elif local_name == "encoding":
                canonical = lookup_charset(value)
                if canonical is None:
                    fallback = True
                else:
                    charset = canonical
            elif local_name == "accept":
                accept = value
            elif local_name == "accept-language":
                accept_language = value

        if fallback:
            return self._process_fallback()
        if not href:
            raise ConfigXMLParseError.of(
                ErrorKind.INVALID_INCLUDE_URI, location, ": missing href"
            )

        config = self.get_tokenizer_factory().config
        max_depth = config.max_include_depth
        if max_depth is not None and location.include_depth >= max_depth:
            raise ConfigXMLParseError.of(ErrorKind.INCLUDE_DEPTH_EXCEEDED, location, max_depth)
        if not is_absolute(href):
            base = raw.get_uri()
            if base is None:
                raise ConfigXMLParseError.of(ErrorKind.INVALID_URL, location)
            href = resolve_uri(base, href)

        headers: Dict[str, str] = {
            "Accept": accept or (
                config.text_include_accept if parse_as_text else config.xml_include_accept
            )
        }
        if accept_language:
            headers["Accept-Language"] = accept_language
        self._logger.debug(
            "Resolving include",
            extra={"href": href, "parse": "text" if parse_as_text else "xml", "from": raw.get_uri()},
        )
        try:
            stream = open_url(href, headers, config.url_timeout)
        except ValueError as error:
            raise ConfigXMLParseError.of(ErrorKind.INVALID_URL, location) from error
        except OSError as error:
            raise ConfigXMLParseError.from_exception(
                error, raw.get_uri(), raw.get_included_from()
            ) from error

        with ExitStack() as stack:
            stack.callback(stream.close)
            if parse_as_text:
                child: ConfigurationReader = TextReader(
                    charset, stream, href, location, config.text_buffer_size
                )
            else:
                factory = self.get_tokenizer_factory()
                child = XIncludeReader(
                    BasicReader(factory.create_tokenizer(stream), href, location, factory)
                )
            stack.pop_all()

        with ExitStack() as stack:
            stack.push(child)
            raw.skip_content()
            stack.pop_all()
        return child

    def _process_fallback(self) -> ConfigurationReader:
        raw = self._delegate
        self._logger.debug(
            "Include cannot be honoured, looking for fallback",
            extra={"location": str(raw.get_location()).strip()},
        )
        include_scope = ScopedReader(raw)
        while include_scope.has_next():
            event_type = include_scope.next()
            if event_type is not EventType.START_ELEMENT:
                continue
            if (
                include_scope.get_namespace_uri() == XINCLUDE_NAMESPACE
                and include_scope.get_local_name() == "fallback"
            ):
                return XIncludeReader(
                    ScopedReader(DrainingReader(include_scope), close_delegate=True)
                )
            include_scope.skip_content()
        self._logger.warning(
            "Include has no fallback and contributes no content",
            extra={"uri": raw.get_uri()},
        )
        return EmptyReader(raw.get_uri(), raw.get_included_from())
