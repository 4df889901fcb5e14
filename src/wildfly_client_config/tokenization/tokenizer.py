"""Incremental XML pull tokenizer.

``PullTokenizer`` feeds an expat parser from a byte stream one chunk at a
time and queues the callbacks as ``Token`` objects, turning expat's push model
into a pull model with one current event. Positions come from expat: lines
and columns are 1-based. Offsets count decoded characters; expat's byte
indexes are converted with an incremental decoder for the detected encoding.

Entity declarations are rejected unless DTD support is enabled, parameter
entities are never parsed, and external entities are never resolved.
"""

import codecs
from collections import deque
from dataclasses import dataclass, field
from typing import BinaryIO, Deque, Dict, List, Optional, Tuple
from xml.parsers import expat

from ..character.encoding import (
    DECLARATION_SAMPLE_SIZE,
    DetectionMethod,
    EncodingDetector,
    EncodingResult,
)
from ..shared.config import ReaderConfig
from ..shared.logging import get_logger
from .events import Attribute, EventType, QName

logger = get_logger(__name__, component="tokenizer")

NAMESPACE_SEPARATOR = " "
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"

_NO_ELEMENTS = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]
# Codecs that consume the byte order mark, so it is not counted in offsets
_BOM_CODECS = {
    "utf-8": "utf-8-sig",
    "utf-16-le": "utf-16",
    "utf-16-be": "utf-16",
    "utf-32-le": "utf-32",
    "utf-32-be": "utf-32",
}
_BUILTIN_SCOPE: Dict[Optional[str], Optional[str]] = {
    "xml": XML_NAMESPACE,
    "xmlns": XMLNS_NAMESPACE,
}


class TokenizerError(Exception):
    """Malformed input, positioned where the tokenizer stopped."""

    def __init__(
        self,
        reason: str,
        line_number: int = -1,
        column_number: int = -1,
        character_offset: int = -1,
    ) -> None:
        super().__init__(
            f"ParseError at [row,col]:[{line_number},{column_number}]\nMessage: {reason}"
        )
        self.reason = reason
        self.line_number = line_number
        self.column_number = column_number
        self.character_offset = character_offset


class InputClosedError(TokenizerError):
    """The tokenizer was used after ``close()``."""


@dataclass(frozen=True)
class Token:
    """One queued event with its position and payload."""

    event_type: EventType
    line_number: int
    column_number: int
    character_offset: int
    name: Optional[QName] = None
    attributes: Tuple[Attribute, ...] = ()
    namespaces: Tuple[Tuple[Optional[str], Optional[str]], ...] = ()
    text: Optional[str] = None
    target: Optional[str] = None
    scope: Dict[Optional[str], Optional[str]] = field(
        default_factory=lambda: _BUILTIN_SCOPE, compare=False, hash=False
    )


def split_name(name: str) -> QName:
    """Split an expat ``uri local [prefix]`` name into a ``QName``."""
    parts = name.split(NAMESPACE_SEPARATOR)
    if len(parts) == 1:
        return QName(None, parts[0])
    if len(parts) == 2:
        return QName(parts[0], parts[1])
    return QName(parts[0], parts[1], parts[2])


class PullTokenizer:
    """Pull-style event source over one XML byte stream.

    The tokenizer starts positioned on START_DOCUMENT without reading any
    input. A document with no root element at all yields START_DOCUMENT
    followed directly by END_DOCUMENT; any other malformation raises
    ``TokenizerError`` once the events preceding it have been delivered.
    """

    def __init__(self, stream: BinaryIO, config: Optional[ReaderConfig] = None) -> None:
        self._stream = stream
        self._config = config or ReaderConfig()
        self._parser = self._create_parser()
        self._tokens: Deque[Token] = deque()
        self._current = Token(EventType.START_DOCUMENT, 1, 1, 0)
        self._text_parts: List[str] = []
        self._text_type: Optional[EventType] = None
        self._text_position = (1, 1, 0)
        self._in_cdata = False
        self._in_doctype = False
        self._pending_namespaces: List[Tuple[Optional[str], Optional[str]]] = []
        self._scopes: List[Dict[Optional[str], Optional[str]]] = [_BUILTIN_SCOPE]
        self._root_seen = False
        self._started = False
        self._finished = False
        self._closed = False
        self._error: Optional[TokenizerError] = None
        self.version: Optional[str] = None
        self.declared_encoding: Optional[str] = None
        self._standalone = -1
        self.encoding_result: Optional[EncodingResult] = None
        self._offset_decoder: Optional[codecs.IncrementalDecoder] = None
        self._uncounted = bytearray()
        self._byte_mark = 0
        self._char_mark = 0

    def _create_parser(self) -> "expat.XMLParserType":
        parser = expat.ParserCreate(namespace_separator=NAMESPACE_SEPARATOR)
        parser.namespace_prefixes = True
        parser.ordered_attributes = True
        parser.specified_attributes = True
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
        parser.XmlDeclHandler = self._xml_declaration
        parser.StartDoctypeDeclHandler = self._start_doctype
        parser.EndDoctypeDeclHandler = self._end_doctype
        parser.EntityDeclHandler = self._entity_declaration
        parser.ExternalEntityRefHandler = self._external_entity_reference
        parser.SkippedEntityHandler = self._skipped_entity
        parser.StartNamespaceDeclHandler = self._start_namespace
        parser.StartElementHandler = self._start_element
        parser.EndElementHandler = self._end_element
        parser.CharacterDataHandler = self._characters
        parser.StartCdataSectionHandler = self._start_cdata
        parser.EndCdataSectionHandler = self._end_cdata
        parser.CommentHandler = self._comment
        parser.ProcessingInstructionHandler = self._processing_instruction
        parser.DefaultHandlerExpand = self._default
        return parser

    # Pull interface

    def has_next(self) -> bool:
        """Return True unless the current event is END_DOCUMENT or the input is closed."""
        return not self._closed and self._current.event_type is not EventType.END_DOCUMENT

    def next(self) -> EventType:
        """Advance to the next event.

        Raises:
            TokenizerError: If the input is malformed
            InputClosedError: If the tokenizer was closed
            OSError: If reading the stream fails
        """
        if self._closed:
            raise InputClosedError("Input source has been closed")
        if self._current.event_type is EventType.END_DOCUMENT:
            raise TokenizerError("No more events after end of document")
        if not self._tokens:
            self._fill()
        if self._tokens:
            self._current = self._tokens.popleft()
            return self._current.event_type
        if self._error is not None:
            raise self._error
        raise TokenizerError("Unexpected end of input")

    def close(self) -> None:
        """Close the underlying stream; later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self._tokens.clear()
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # Current event

    @property
    def event_type(self) -> EventType:
        return self._current.event_type

    @property
    def name(self) -> Optional[QName]:
        return self._current.name

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return self._current.attributes

    @property
    def namespaces(self) -> Tuple[Tuple[Optional[str], Optional[str]], ...]:
        return self._current.namespaces

    @property
    def text(self) -> Optional[str]:
        return self._current.text

    @property
    def pi_target(self) -> Optional[str]:
        return self._current.target

    @property
    def line_number(self) -> int:
        return self._current.line_number

    @property
    def column_number(self) -> int:
        return self._current.column_number

    @property
    def character_offset(self) -> int:
        return self._current.character_offset

    def lookup_namespace(self, prefix: Optional[str]) -> Optional[str]:
        """Namespace URI bound to ``prefix`` (``None`` for the default) at the current event."""
        return self._current.scope.get(prefix)

    # Document properties

    @property
    def encoding(self) -> Optional[str]:
        """Detected input encoding, known once reading has started."""
        if self.encoding_result is None:
            return None
        return self.encoding_result.encoding

    @property
    def standalone(self) -> bool:
        return self._standalone == 1

    @property
    def standalone_set(self) -> bool:
        return self._standalone != -1

    # Feeding

    def _fill(self) -> None:
        while not self._tokens and not self._finished:
            data = self._stream.read(self._config.read_chunk_size)
            if not self._started:
                self._started = True
                self.encoding_result = EncodingDetector().detect(data[:DECLARATION_SAMPLE_SIZE])
                codec = self.encoding_result.encoding
                if self.encoding_result.method is DetectionMethod.BOM:
                    codec = _BOM_CODECS.get(codec, codec)
                self._offset_decoder = codecs.getincrementaldecoder(codec)(errors="replace")
            self._uncounted += data
            try:
                if data:
                    self._parser.Parse(data, False)
                else:
                    self._parser.Parse(b"", True)
                    self._finish()
            except expat.ExpatError as error:
                if error.code == _NO_ELEMENTS and not self._root_seen:
                    self._finish()
                else:
                    self._fail(TokenizerError(
                        expat.ErrorString(error.code),
                        error.lineno,
                        error.offset + 1,
                        self._character_offset(self._parser.ErrorByteIndex),
                    ))
            except TokenizerError as error:
                self._fail(error)

    def _finish(self) -> None:
        self._flush_text()
        line, column, offset = self._position()
        self._tokens.append(Token(EventType.END_DOCUMENT, line, column, offset))
        self._finished = True

    def _fail(self, error: TokenizerError) -> None:
        logger.debug(
            "Tokenizer stopped on malformed input",
            extra={"reason": error.reason, "line": error.line_number},
        )
        self._error = error
        self._finished = True

    def _position(self) -> Tuple[int, int, int]:
        parser = self._parser
        return (
            parser.CurrentLineNumber,
            parser.CurrentColumnNumber + 1,
            self._character_offset(parser.CurrentByteIndex),
        )

    def _character_offset(self, byte_index: int) -> int:
        """Characters decoded before ``byte_index``; positions only move forward."""
        count = byte_index - self._byte_mark
        if count > 0 and self._offset_decoder is not None:
            self._char_mark += len(self._offset_decoder.decode(bytes(self._uncounted[:count])))
            del self._uncounted[:count]
            self._byte_mark = byte_index
        return self._char_mark

    def _emit(self, event_type: EventType, **payload: object) -> None:
        self._flush_text()
        line, column, offset = self._position()
        self._tokens.append(Token(
            event_type, line, column, offset, scope=self._scopes[-1], **payload
        ))

    def _append_text(self, event_type: EventType, data: str) -> None:
        if self._text_type is not event_type:
            self._flush_text()
            self._text_type = event_type
            self._text_position = self._position()
        self._text_parts.append(data)

    def _flush_text(self) -> None:
        if self._text_type is None:
            return
        line, column, offset = self._text_position
        self._tokens.append(Token(
            self._text_type, line, column, offset,
            text="".join(self._text_parts), scope=self._scopes[-1],
        ))
        self._text_type = None
        self._text_parts = []

    # expat callbacks

    def _xml_declaration(self, version: Optional[str], encoding: Optional[str], standalone: int) -> None:
        self.version = version
        self.declared_encoding = encoding
        self._standalone = standalone

    def _start_doctype(self, name: str, system_id: Optional[str],
                       public_id: Optional[str], has_internal_subset: bool) -> None:
        self._emit(EventType.DTD, text=name)
        self._in_doctype = True

    def _end_doctype(self) -> None:
        self._in_doctype = False

    def _entity_declaration(self, name, is_parameter_entity, value, base,
                            system_id, public_id, notation_name) -> None:
        line, column, offset = self._position()
        if not self._config.support_dtd:
            raise TokenizerError(
                f'Entity declaration "{name}" is not allowed when DTD support is disabled',
                line, column, offset,
            )
        if system_id is not None:
            raise TokenizerError(
                f'External entity "{name}" is not supported', line, column, offset
            )

    def _external_entity_reference(self, context, base, system_id, public_id) -> int:
        line, column, offset = self._position()
        raise TokenizerError(
            f'External entity "{system_id}" is not resolved', line, column, offset
        )

    def _skipped_entity(self, name: str, is_parameter_entity: bool) -> None:
        if not is_parameter_entity:
            self._emit(EventType.ENTITY_REFERENCE, name=QName(None, name), text="")

    def _start_namespace(self, prefix: Optional[str], uri: Optional[str]) -> None:
        self._pending_namespaces.append((prefix, uri or None))

    def _start_element(self, name: str, attributes: List[str]) -> None:
        self._flush_text()
        scope = self._scopes[-1]
        namespaces = tuple(self._pending_namespaces)
        if namespaces:
            scope = dict(scope)
            scope.update(namespaces)
            self._pending_namespaces = []
        self._scopes.append(scope)
        self._root_seen = True
        attribute_list = tuple(
            Attribute(split_name(attributes[index]), attributes[index + 1])
            for index in range(0, len(attributes), 2)
        )
        self._emit(
            EventType.START_ELEMENT,
            name=split_name(name),
            attributes=attribute_list,
            namespaces=namespaces,
        )

    def _end_element(self, name: str) -> None:
        self._emit(EventType.END_ELEMENT, name=split_name(name))
        self._scopes.pop()

    def _characters(self, data: str) -> None:
        if self._in_cdata:
            self._text_parts.append(data)
        else:
            self._append_text(EventType.CHARACTERS, data)

    def _start_cdata(self) -> None:
        self._flush_text()
        self._in_cdata = True
        self._text_type = EventType.CDATA
        self._text_position = self._position()

    def _end_cdata(self) -> None:
        self._in_cdata = False
        self._flush_text()

    def _comment(self, data: str) -> None:
        self._emit(EventType.COMMENT, text=data)

    def _processing_instruction(self, target: str, data: str) -> None:
        self._emit(EventType.PROCESSING_INSTRUCTION, target=target, text=data)

    def _default(self, data: str) -> None:
        # Whitespace around the root element; markup inside the DTD also lands here
        if len(self._scopes) == 1 and not self._in_doctype and data and not data.strip(" \t\r\n"):
            self._append_text(EventType.SPACE, data)


@dataclass(frozen=True)
class TokenizerFactory:
    """Creates tokenizers that share one ``ReaderConfig``."""

    config: ReaderConfig = field(default_factory=ReaderConfig)

    def create_tokenizer(self, stream: BinaryIO) -> PullTokenizer:
        """Create a tokenizer over ``stream``; the tokenizer owns the stream."""
        return PullTokenizer(stream, self.config)
